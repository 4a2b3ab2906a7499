#!/usr/bin/env python3
"""
Doctor Recommendation Local Runner

Runs the recommendation flow from the command line without starting the
API server or the web front-end.

Two modes:
- Live: build the prompt, call Gemini, normalize the reply
- Offline: normalize a saved raw reply (--raw-file), no API key needed.
  Handy when a reply from the logs failed to parse.

Usage:
    python scripts/query_doctors.py
    python scripts/query_doctors.py --symptoms "fever and cough" --location Mumbai
    python scripts/query_doctors.py --raw-file reply.txt
"""

import argparse
import asyncio
import json
import logging
import os
import sys

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from doctor_finder.agents.doctor.generator import get_text_generator
from doctor_finder.schemas.recommendations import RecommendationResponse
from doctor_finder.services.normalizer import NormalizationResult, normalize_reply
from doctor_finder.services.recommendation_service import recommend_doctors


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def print_response(response: RecommendationResponse):
    """Pretty print a recommendation envelope."""
    print("\n" + "=" * 60)
    print(f"STATUS: {response.status}")
    print(f"MESSAGE: {response.message}")
    print("=" * 60)

    if response.recommendation:
        print(f"\n✅ {len(response.recommendation)} recommendation(s):\n")
        for i, doctor in enumerate(response.recommendation, 1):
            print(f"--- Doctor #{i} ---")
            print(f"  Name:      {doctor.get('name')}")
            print(f"  Specialty: {doctor.get('specialty')}")
            print(f"  Address:   {doctor.get('address')}")
            print(f"  Phone:     {doctor.get('phone')}")
            print(f"  Rating:    {doctor.get('rating')}")
            print(f"  Hours:     {doctor.get('opening_hours')}")
            print(f"  Website:   {doctor.get('website')}")
            print()
    else:
        print(f"\n❌ No recommendations (error_code={response.error_code})\n")

    for result in response.debug.get("validation_results", []):
        icon = "✅" if not result["missing_keys"] and result["iframe_valid"] else "⚠️ "
        print(f"{icon} Doctor {result['doctor_index']}: {result['iframe_validation_message']}")
        if result["missing_keys"]:
            print(f"     Missing: {', '.join(result['missing_keys'])}")


def print_normalization(result: NormalizationResult):
    """Pretty print the outcome of normalizing a saved reply."""
    print("\n" + "=" * 60)
    print(f"STATUS: {result.status}")
    print("=" * 60)

    if not result.ok:
        print(f"\n❌ {result.error_kind.value if result.error_kind else 'error'}: {result.error_message}\n")
        return

    print(json.dumps(result.records, indent=2, ensure_ascii=False))
    for entry in result.validation_results:
        print(json.dumps(entry, ensure_ascii=False))


async def run_live(symptoms: str, location: str):
    """Run one live request against Gemini."""
    generator = get_text_generator()
    if generator is None:
        print("\n⚠️  ERROR: GOOGLE_API_KEY environment variable not set!")
        print("   Please set it in your .env file or export it:")
        print("   export GOOGLE_API_KEY=your-gemini-api-key")
        print("\n   Get your API key at: https://aistudio.google.com/app/apikey")
        return None

    print("\n" + "=" * 60)
    print("DOCTOR RECOMMENDATION RUN (Gemini)")
    print("=" * 60)
    print(f"\nSymptoms: {symptoms}")
    print(f"Location: {location}")
    print("\nCalling Gemini API...")

    response = await recommend_doctors(symptoms, location, generator)
    print_response(response)
    return response


def main():
    parser = argparse.ArgumentParser(
        description="Run the doctor recommendation flow locally",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Live query
  python scripts/query_doctors.py --symptoms "persistent headache" --location "Pune"

  # Re-normalize a reply saved from the logs
  python scripts/query_doctors.py --raw-file reply.txt --expected-count 3
        """
    )

    parser.add_argument(
        "--symptoms", "-s",
        type=str,
        default="fever and cough",
        help="Symptom description (default: 'fever and cough')"
    )
    parser.add_argument(
        "--location", "-l",
        type=str,
        default="Mumbai",
        help="User location (default: Mumbai)"
    )
    parser.add_argument(
        "--raw-file", "-r",
        type=str,
        help="Normalize the raw model reply stored in this file instead of calling Gemini"
    )
    parser.add_argument(
        "--expected-count",
        type=int,
        help="Require exactly this many records when using --raw-file"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.raw_file:
        with open(args.raw_file, encoding="utf-8") as f:
            raw = f.read()
        print_normalization(normalize_reply(raw, expected_count=args.expected_count))
    else:
        asyncio.run(run_live(args.symptoms, args.location))


if __name__ == "__main__":
    main()
