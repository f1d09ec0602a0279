"""Command-line helper for turning a photo into a vintage greeting card.

This utility mirrors the web workflow:

1. Select a photo and generate the vintage poster card (Seedream or Gemini).
2. Save a record of the card to the history table (failures only warn).
3. Optionally email the card to the recipient through Resend.

Example usage::

    python card_workflow.py --image photo.jpg --output-dir out/
    python card_workflow.py --image photo.jpg --to-name Alice --to-email a@b.com \\
        --from-name Bob --message "Happy New Year" --send-email
"""
from __future__ import annotations

import argparse
import base64
import mimetypes
from pathlib import Path

import httpx

from app.config import get_settings
from app.errors import CardServiceError
from app.services.card_store import build_card_store
from app.services.card_workflow import CardWorkflow
from app.services.email_sender import dispatch_card_email
from app.services.image_provider import build_generator


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a vintage greeting card from a photo")
    parser.add_argument("--image", type=Path, required=True, help="Path to the source photo")
    parser.add_argument("--from-name", default="", help="Sender name")
    parser.add_argument("--to-name", default="", help="Recipient name")
    parser.add_argument("--to-email", default="", help="Recipient email address")
    parser.add_argument("--message", default="", help="Card message (use \\n for line breaks)")
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory to write the generated card image",
    )
    parser.add_argument(
        "--send-email",
        action="store_true",
        help="Email the generated card to the recipient",
    )
    return parser.parse_args()


def export_card(output_dir: Path, filename: str, result_url: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / filename
    if result_url.startswith("data:"):
        _header, encoded = result_url.split(",", 1)
        path.write_bytes(base64.b64decode(encoded))
    else:
        response = httpx.get(result_url, timeout=60, follow_redirects=True)
        response.raise_for_status()
        path.write_bytes(response.content)
    return path


def main() -> None:
    args = parse_args()
    if not args.image.exists():
        raise SystemExit(f"Image not found: {args.image}")

    settings = get_settings()
    workflow = CardWorkflow(build_generator(settings), build_card_store(settings.supabase))
    workflow.from_name = args.from_name
    workflow.to_name = args.to_name
    workflow.to_email = args.to_email
    workflow.message = args.message.replace("\\n", "\n")

    mime_type, _ = mimetypes.guess_type(args.image.name)
    workflow.select_image(args.image.read_bytes(), mime_type)

    print("=== Step 1 · Generate ===")
    try:
        outcome = workflow.generate()
    except CardServiceError as exc:
        raise SystemExit(f"Generation failed: {exc.message}") from exc
    if outcome is None:
        raise SystemExit("Nothing to generate.")

    preview = outcome.image_url if len(outcome.image_url) < 120 else outcome.image_url[:117] + "..."
    print(f"Card: {preview}")

    print("\n=== Step 2 · Save ===")
    print("Saved to Gallery!" if outcome.saved else f"Saving failed: {outcome.warning}")

    if args.output_dir:
        path = export_card(args.output_dir, workflow.download_filename(), outcome.image_url)
        print(f"\nCard written to: {path.resolve()}")

    if args.send_email:
        print("\n=== Step 3 · Email ===")
        try:
            response = workflow.send_email(dispatch_card_email)
        except CardServiceError as exc:
            raise SystemExit(f"Failed to send: {exc.message}") from exc
        print(f"Email sent successfully! {response}")


if __name__ == "__main__":
    main()
