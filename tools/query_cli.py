#!/usr/bin/env python3
"""
CLI tool for generating recipes and finding food images from the command line.
Usage: python tools/query_cli.py --recipe "lasagna" --image "tomato"
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

import httpx

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.handlers import HandlerResult, generate_recipe, lookup_image
from app.core.image_search import build_image_search
from app.core.recipe_source import build_recipe_source
from config.settings import get_settings


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate a recipe and/or look up a food image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python tools/query_cli.py --recipe lasagna
  python tools/query_cli.py -i tomato --json
  python tools/query_cli.py -r "pad thai" -i "pad thai" --strict
        """
    )

    parser.add_argument(
        "-r", "--recipe",
        type=str,
        help="Dish to generate a recipe for"
    )

    parser.add_argument(
        "-i", "--image",
        type=str,
        help="Food or ingredient to find an image for"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Report failure kinds and strict status codes"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output raw JSON bodies"
    )

    return parser.parse_args(argv)


def format_recipe(body: dict) -> str:
    """Format a recipe body for display."""
    output = []
    output.append(f"\n{'='*60}")
    output.append(f"  {body.get('name', '')}")
    output.append(f"{'='*60}")
    output.append(f"\n  {body.get('description', '')}")

    output.append(f"\n  Ingredients:")
    for ingredient in body.get("ingredients", []):
        output.append(f"    - {ingredient['amount']} {ingredient['name']}: {ingredient['description']}")

    output.append(f"\n  Instructions:")
    instructions = body.get("instructions", [])
    if isinstance(instructions, str):
        output.append(f"  {instructions}")
    else:
        for i, step in enumerate(instructions, 1):
            output.append(f"  {i}. {step}")

    return "\n".join(output)


def format_result(label: str, result: HandlerResult) -> str:
    """Format a handler result for display."""
    if result.is_error:
        kind = result.body.get("kind")
        prefix = f"{label} failed ({result.status_code}"
        prefix += f", {kind})" if kind else ")"
        return f"{prefix}: {result.body['error']}"
    if label == "Recipe":
        return format_recipe(result.body)
    return f"\nImage: {result.body['url']}\nThumbnail: {result.body['thumb']}"


async def run(args) -> int:
    """Run the requested lookups and print them. Returns the exit status."""
    settings = get_settings()
    results = []

    if args.recipe is not None:
        source = build_recipe_source(settings)
        try:
            results.append(("Recipe", await generate_recipe(source, args.recipe, strict=args.strict)))
        finally:
            await source.aclose()

    if args.image is not None:
        async with httpx.AsyncClient(timeout=settings.search_timeout) as http_client:
            search = build_image_search(settings, http_client)
            results.append(("Image", await lookup_image(search, args.image, strict=args.strict)))

    for label, result in results:
        if args.json:
            print(json.dumps(result.body, indent=2))
        else:
            print(format_result(label, result))

    return 1 if any(result.is_error for _, result in results) else 0


def main():
    """Main CLI entry point."""
    args = parse_args()

    if args.recipe is None and args.image is None:
        print("Error: --recipe or --image is required", file=sys.stderr)
        sys.exit(1)

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
