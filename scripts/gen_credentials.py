import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.core.config import get_settings
from app.services.credential_service import generate_users
from app.services.csv_parser_service import CSVValidationError, parse_csv
from app.services.import_service import export_users_csv


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate emails and passwords for a people CSV without touching the database"
    )
    parser.add_argument("input", type=Path, help="CSV with name, postal_code and birthday columns")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Where to write the credentials (defaults to <input>_credentials.csv)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()

    if not args.input.exists():
        print(f"Missing file: {args.input}", file=sys.stderr)
        return 1

    output = args.output or args.input.with_name(f"{args.input.stem}_credentials.csv")

    try:
        parsed = parse_csv(
            args.input.read_text(encoding="utf-8"),
            max_rows=settings.max_csv_rows,
            max_bytes=settings.max_csv_bytes,
        )
    except CSVValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for error in parsed.errors:
        print(f"Skipped line {error.line}: {error.message}", file=sys.stderr)

    users = generate_users(
        parsed.rows,
        domain=settings.email_domain,
        password_length=settings.password_length,
    )
    output.write_text(export_users_csv(users), encoding="utf-8")

    print("Distribute to users:", output)
    print("Rows created:", len(users))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
