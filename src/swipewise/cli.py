import argparse
import json
import logging
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

from swipewise.config import settings
from swipewise.domain.models import ClassificationMethod
from swipewise.schemas.requests import PortfolioRequest, RecommendRequest, SpendingImportItem


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SwipeWise card recommendation toolkit")
    sub = parser.add_subparsers(dest="command", required=True)

    classify = sub.add_parser("classify", help="Classify a purchase description")
    classify.add_argument("description")
    classify.add_argument(
        "--method",
        choices=[method.value for method in ClassificationMethod],
        help="Force a single classification tier",
    )

    recommend = sub.add_parser("recommend", help="Rank cards for a purchase")
    recommend.add_argument("message", nargs="?", help="Free-text purchase description")
    recommend.add_argument("--category", help="Skip classification and use this category")
    recommend.add_argument("--amount", type=float)
    recommend.add_argument("--user", dest="user_id")
    recommend.add_argument("--date", type=date.fromisoformat, dest="purchase_date")
    recommend.add_argument("--method", choices=[method.value for method in ClassificationMethod])

    gaps = sub.add_parser("gaps", help="Find categories where the user's cards trail the market")
    gaps.add_argument("user_id")
    gaps.add_argument("--category", help="Compare a single category instead of all tracked ones")
    gaps.add_argument("--date", type=date.fromisoformat, dest="as_of")

    record = sub.add_parser("record", help="Record a purchase in the spending ledger")
    record.add_argument("user_id")
    record.add_argument("card_id")
    record.add_argument("category")
    record.add_argument("amount", type=float)
    record.add_argument("--date", type=date.fromisoformat, dest="purchase_date")

    history = sub.add_parser("history", help="Show a user's most recent purchases")
    history.add_argument("user_id")
    history.add_argument("--limit", type=int, default=10)

    bulk = sub.add_parser("import", help="Import purchases for a user from a JSON file")
    bulk.add_argument("user_id")
    bulk.add_argument("path", help="JSON list of {card_id, category, amount, purchase_date}")

    sub.add_parser("ingest", help="Embed category exemplars into the vector index")
    return parser


def _print_json(payload) -> None:
    if isinstance(payload, list):
        print(json.dumps([item.model_dump(mode="json") for item in payload], indent=2))
        return
    print(payload.model_dump_json(indent=2))


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "ingest":
        from swipewise.rag.ingest import main as run_ingest

        run_ingest()
        return

    from swipewise.agents.orchestrator import RecommendationOrchestrator

    orchestrator = RecommendationOrchestrator.from_settings(settings)
    try:
        if args.command == "classify":
            method = ClassificationMethod(args.method) if args.method else None
            _print_json(orchestrator.classifier.categorize(args.description, method))
        elif args.command == "recommend":
            request = RecommendRequest(
                message=args.message,
                category=args.category,
                amount=args.amount,
                user_id=args.user_id,
                purchase_date=args.purchase_date,
                method=args.method,
            )
            _print_json(orchestrator.recommend(request))
        elif args.command == "gaps":
            request = PortfolioRequest(
                user_id=args.user_id,
                mode="category" if args.category else "auto",
                category=args.category,
                as_of=args.as_of,
            )
            _print_json(orchestrator.analyze_portfolio(request))
        elif args.command == "record":
            record = orchestrator.record_purchase(
                args.user_id, args.card_id, args.category, args.amount, args.purchase_date
            )
            _print_json(record)
        elif args.command == "history":
            _print_json(orchestrator.recent_transactions(args.user_id, args.limit))
        elif args.command == "import":
            items = json.loads(Path(args.path).read_text(encoding="utf-8"))
            count = orchestrator.import_spending(
                args.user_id, [SpendingImportItem.model_validate(item) for item in items]
            )
            print(f"Imported {count} transaction(s) for {args.user_id}")
    finally:
        orchestrator.close()


if __name__ == "__main__":
    main()
