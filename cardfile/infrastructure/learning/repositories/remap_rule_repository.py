"""Repository for the remap rule file."""

from pathlib import Path

import structlog

from cardfile.domain.learning.exceptions import DiscoveryError
from cardfile.domain.learning.value_objects import RemapRule

logger = structlog.get_logger(__name__)


def parse_remap_rule(line: str, line_number: int, path: Path | None = None) -> RemapRule:
    """
    Parse one remap rule line.

    Lines hold "root relative_path" or "root relative_path rename",
    separated by whitespace.

    Raises:
        DiscoveryError: If the line has any other number of fields
    """
    fields = line.split()
    if len(fields) not in (2, 3):
        location = f" in {path}" if path is not None else ""
        raise DiscoveryError(
            f"Unexpected number of fields ({len(fields)}) on line {line_number}{location}",
            path=path,
        )
    rename = fields[2] if len(fields) == 3 else None
    return RemapRule(external_root=Path(fields[0]), sub_path=fields[1], rename=rename)


class RemapRuleRepository:
    """Reads remap rules that pull card files from outside the cards root."""

    def load(self, path: Path) -> list[RemapRule]:
        """
        Load remap rules in file order.

        A missing rule file means there are no rules.

        Raises:
            DiscoveryError: If a line is malformed
            OSError: If the file exists but can not be read
        """
        if not path.exists():
            logger.debug("remap_rules_missing", path=str(path))
            return []

        rules: list[RemapRule] = []
        with path.open(encoding="utf-8") as rule_file:
            for line_number, line in enumerate(rule_file, start=1):
                rules.append(parse_remap_rule(line, line_number, path))

        logger.debug("remap_rules_loaded", path=str(path), rule_count=len(rules))
        return rules
