"""All card sets under a cards root."""

from datetime import datetime
from pathlib import Path

import structlog

from cardfile.application.learning.protocols.card_set_locator import (
    CardSetLocatorProtocol,
    RemapRuleRepositoryProtocol,
)
from cardfile.application.learning.protocols.progress_repository import (
    ProgressRepositoryProtocol,
)
from cardfile.application.learning.services.study_session import (
    CardSelection,
    ReviewOutcome,
    StudySession,
)
from cardfile.config import Settings, configure_logging, get_settings
from cardfile.domain.common.value_objects import Fingerprint
from cardfile.domain.learning.entities.card import Card
from cardfile.domain.learning.entities.card_set import CardSet
from cardfile.domain.learning.exceptions import CardSetNotFoundError
from cardfile.domain.learning.value_objects import SetStatistics
from cardfile.infrastructure.learning.repositories.progress_repository import (
    ProgressRepository,
)
from cardfile.infrastructure.learning.repositories.remap_rule_repository import (
    RemapRuleRepository,
)
from cardfile.infrastructure.learning.services.card_set_locator import CardSetLocator

logger = structlog.get_logger(__name__)


class CardLibrary:
    """
    Loaded card sets, sorted by logical id, and the progress that still
    needs to be written for them.
    """

    def __init__(
        self,
        card_sets: list[CardSet],
        progress_repository: ProgressRepositoryProtocol,
        draw_limit: int | None = None,
    ) -> None:
        self._card_sets = sorted(card_sets, key=lambda card_set: card_set.id.value)
        self._by_id = {card_set.id.value: card_set for card_set in self._card_sets}
        self.progress_repository = progress_repository
        self.draw_limit = draw_limit

    @classmethod
    def open(
        cls,
        root: Path | None = None,
        remap_rules_path: Path | None = None,
        settings: Settings | None = None,
        *,
        locator: CardSetLocatorProtocol | None = None,
        remap_rule_repository: RemapRuleRepositoryProtocol | None = None,
        progress_repository: ProgressRepositoryProtocol | None = None,
    ) -> "CardLibrary":
        """
        Discover and load every card set.

        Logging is configured from the settings unless the embedding
        application already configured structlog.

        Args:
            root: Cards root, defaults to ``CARDS_ROOT``
            remap_rules_path: Remap rule file, defaults to the rule file in the root
            settings: Settings to use, defaults to ``get_settings()``
            locator: Card set discovery, defaults to the file system locator
            remap_rule_repository: Remap rule reader
            progress_repository: Card and progress file access

        Raises:
            DiscoveryError: If discovery fails
            CardParseError: If a definition file is malformed
            ProgressRecordError: If a progress file is malformed
            OSError: If a file can not be read
        """
        settings = settings or get_settings()
        configure_logging(settings)
        root = Path(root) if root is not None else settings.CARDS_ROOT
        if remap_rules_path is None:
            remap_rules_path = settings.remap_rules_path(root)

        locator = locator or CardSetLocator(settings.DEFINITION_SUFFIX, settings.PROGRESS_SUFFIX)
        remap_rule_repository = remap_rule_repository or RemapRuleRepository()
        progress_repository = progress_repository or ProgressRepository()

        rules = remap_rule_repository.load(remap_rules_path)
        bindings = locator.discover(root, rules)

        card_sets = [progress_repository.load(CardSet.from_binding(binding)) for binding in bindings]

        logger.info(
            "card_library_opened",
            root=str(root),
            remap_rule_count=len(rules),
            card_set_count=len(card_sets),
            card_count=sum(len(card_set.cards) for card_set in card_sets),
        )
        return cls(card_sets, progress_repository, draw_limit=settings.DRAW_LIMIT)

    @property
    def card_sets(self) -> list[CardSet]:
        return list(self._card_sets)

    def get(self, logical_id: str) -> CardSet:
        """
        Get a card set by logical id.

        Raises:
            CardSetNotFoundError: If no card set has the id
        """
        card_set = self._by_id.get(logical_id)
        if card_set is None:
            raise CardSetNotFoundError(logical_id)
        return card_set

    def statistics(self, now: datetime | None = None) -> list[SetStatistics]:
        return [card_set.statistics(now) for card_set in self._card_sets]

    def start_session(
        self,
        logical_id: str,
        selection: CardSelection = CardSelection.DUE_OR_NEW,
        interval: int | None = None,
    ) -> StudySession:
        """Start studying one card set."""
        card_set = self.get(logical_id)
        if self.draw_limit is None:
            return StudySession(card_set, selection, interval)
        return StudySession(card_set, selection, interval, draw_limit=self.draw_limit)

    def review(
        self,
        logical_id: str,
        fingerprint: Fingerprint | str,
        outcome: ReviewOutcome,
        now: datetime | None = None,
    ) -> Card:
        """
        Apply a spaced-repetition answer outside of a study session.

        Raises:
            CardSetNotFoundError: If no card set has the id
            CardNotFoundError: If the card set has no card with the fingerprint
        """
        card_set = self.get(logical_id)
        if outcome is ReviewOutcome.SKIP:
            return card_set.find_card(fingerprint)
        return card_set.review(fingerprint, outcome is ReviewOutcome.CORRECT, now)

    @property
    def pending_saves(self) -> list[str]:
        """Logical ids of card sets with unsaved progress."""
        return [card_set.id.value for card_set in self._card_sets if card_set.has_unsaved_progress]

    def save_pending(self) -> list[str]:
        """
        Write progress files for card sets with unsaved progress.

        Orphaned progress is preserved. A failed write leaves that card
        set and the ones after it pending.

        Returns:
            Logical ids of the saved card sets
        """
        saved: list[str] = []
        for card_set in self._card_sets:
            if not card_set.has_unsaved_progress:
                continue
            self.progress_repository.save(card_set, clean=False)
            card_set.collect_events()
            saved.append(card_set.id.value)

        logger.info("pending_progress_saved", card_set_ids=saved, saved_count=len(saved))
        return saved
