import logging
from datetime import date

from swipewise.config import Settings
from swipewise.domain.models import (
    CapUtilization,
    CardSpend,
    CategoryComparison,
    PortfolioAnalysis,
    SpendingRecord,
)
from swipewise.engine.caps import SpendingCapTracker
from swipewise.engine.evaluator import RewardCalculator
from swipewise.engine.portfolio import PortfolioGapAnalyzer
from swipewise.engine.selectors import rank_cards
from swipewise.nlp.classifier import CategoryClassifier, build_classifier
from swipewise.nlp.semantic import VectorMatch
from swipewise.repository.catalog_store import CatalogStore
from swipewise.repository.ledger import (
    JsonlSpendingLedger,
    SpendingLedger,
    summarize_by_card,
    summarize_by_category,
)
from swipewise.schemas.requests import PortfolioRequest, RecommendRequest, SpendingImportItem
from swipewise.schemas.responses import RecommendResponse, SpendingSummary

logger = logging.getLogger(__name__)


class RecommendationOrchestrator:
    def __init__(
        self,
        catalog: CatalogStore,
        ledger: SpendingLedger,
        classifier: CategoryClassifier,
        analyzer: PortfolioGapAnalyzer | None = None,
    ):
        self.catalog = catalog
        self.ledger = ledger
        self.classifier = classifier
        self.cap_tracker = SpendingCapTracker(ledger)
        self.calculator = RewardCalculator(self.cap_tracker, catalog.taxonomy)
        self.analyzer = analyzer or PortfolioGapAnalyzer(catalog)

    @classmethod
    def from_settings(cls, config: Settings) -> "RecommendationOrchestrator":
        catalog = CatalogStore(config.catalog_file)
        analyzer = PortfolioGapAnalyzer(
            catalog,
            min_improvement=config.gap_min_improvement,
            medium_priority=config.gap_medium_priority,
            high_priority=config.gap_high_priority,
            min_card_increment=config.gap_min_card_increment,
            max_recommendations=config.gap_max_recommendations,
            market_ceiling=config.market_rate_ceiling,
            tracked_categories=config.gap_tracked_categories,
        )
        return cls(
            catalog=catalog,
            ledger=JsonlSpendingLedger(config.ledger_file),
            classifier=build_classifier(config),
            analyzer=analyzer,
        )

    def recommend(self, request: RecommendRequest) -> RecommendResponse:
        classification = None
        if request.category:
            category = request.category
        elif request.message:
            classification = self.classifier.categorize(request.message, request.method)
            category = classification.category
        else:
            raise ValueError("Either message or category is required.")

        if request.user_id:
            cards = self.catalog.owned_cards(request.user_id)
        else:
            cards = self.catalog.load_cards()

        ranked = rank_cards(
            cards,
            category,
            request.amount,
            request.purchase_date or date.today(),
            self.calculator,
            user_id=request.user_id,
        )
        if not ranked:
            raise ValueError("No cards available.")

        logger.info("Recommending %s for %s", ranked[0].card_id, category)
        return RecommendResponse(
            category=category,
            classification=classification,
            best_card=ranked[0],
            ranked_cards=ranked,
        )

    def record_purchase(
        self,
        user_id: str,
        card_id: str,
        category: str,
        amount: float,
        on: date | None = None,
    ) -> SpendingRecord:
        self.catalog.get_card(card_id)
        record = SpendingRecord(
            user_id=user_id,
            card_id=card_id,
            category=category,
            amount=amount,
            date=on or date.today(),
        )
        self.ledger.record(record)
        return record

    def import_spending(self, user_id: str, transactions: list[SpendingImportItem]) -> int:
        """Validate every transaction first, then append them in one write."""
        records = []
        for item in transactions:
            self.catalog.get_card(item.card_id)
            records.append(
                SpendingRecord(
                    user_id=user_id,
                    card_id=item.card_id,
                    category=item.category,
                    amount=item.amount,
                    date=item.purchase_date or date.today(),
                )
            )
        count = self.ledger.record_many(records)
        logger.info("Imported %d transaction(s) for %s", count, user_id)
        return count

    def recent_transactions(self, user_id: str, limit: int = 10) -> list[SpendingRecord]:
        return self.ledger.recent_records(user_id, limit)

    def analyze_portfolio(self, request: PortfolioRequest) -> PortfolioAnalysis | CategoryComparison:
        return self.analyzer.analyze(request.user_id, request.mode, request.category, request.as_of)

    def spending_summary(self, user_id: str, year: int) -> SpendingSummary:
        records = self.ledger.records_for(user_id, date(year, 1, 1), date(year, 12, 31))
        categories = summarize_by_category(records)
        return SpendingSummary(
            user_id=user_id,
            year=year,
            total_amount=round(sum(item.total_amount for item in categories), 2),
            categories=categories,
        )

    def spending_by_card(self, user_id: str, year: int) -> list[CardSpend]:
        records = self.ledger.records_for(user_id, date(year, 1, 1), date(year, 12, 31))
        return summarize_by_card(records, self.catalog.load_cards())

    def similar_examples(self, description: str, limit: int = 5) -> list[VectorMatch]:
        return self.classifier.similar_examples(description, limit)

    def cap_utilization(self, user_id: str, on: date | None = None) -> list[CapUtilization]:
        cards = self.catalog.owned_cards(user_id)
        return self.cap_tracker.cap_utilization(user_id, cards, on or date.today())

    def close(self) -> None:
        self.classifier.close()
