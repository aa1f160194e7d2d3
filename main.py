"""
Entry point for the College Comparison & AI Visibility Parser.

Usage:
  # Parse the bundled sample responses and print a report:
  python main.py demo

  # Parse a saved comparison response:
  python main.py compare response.txt "Client College" "Competitor College"

  # Extract ranked mentions of known colleges:
  python main.py visibility response.txt "College A" "College B" ...

  # Parse a saved detail response:
  python main.py detail response.txt "College Name"

  # Run tests:
  python main.py test
"""

from __future__ import annotations

import os
import argparse
import sys
import json
import logging

from config.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=settings.LOG_FORMAT,
    datefmt=settings.LOG_DATEFMT,
)

logger = logging.getLogger("main")


SAMPLE_COMPARISON = """Here is the comparison you asked for:
```json
{
  "features": [
    {
      "featureName": "placements",
      "winner": "competitor",
      "confidenceLevel": "moderate",
      "clientReasoning": "Consistent placements with strong IT recruiters.",
      "competitorReasoning": "Good placements in core branches.",
      "clientDataPoints": {"placementRate": "90-95%", "averagePackage": "6.5 LPA",
                           "topRecruiters": ["Microsoft", "Amazon", "TCS"]},
      "competitorDataPoints": {"placementRate": "80%", "averagePackage": "5.8 LPA",
                               "topRecruiters": ["Infosys", "Wipro"]},
      "sources": ["https://www.shiksha.com"]
    },
    {
      "featureName": "fees",
      "winner": "client",
      "confidenceLevel": "high",
      "clientDataPoints": {"annualFees": "1.8 lakh"},
      "competitorDataPoints": {"annualFees": "Not specified"}
    },
    {
      "featureName": "accreditation",
      "winner": "tie",
      "confidenceLevel": "medium",
      "clientDataPoints": {"NAAC": "Accredited with A+ grade", "NIRF": "151-200"},
      "competitorDataPoints": {"naacGrade": "B", "nirfRank": "N/A"}
    },
    {
      "featureName": "Industry Exposure",
      "winner": "unclear",
      "confidenceLevel": "low",
      "clientReasoning": "MoUs with 50+ companies and mandatory internships.",
      "competitorReasoning": "Some industrial visits.",
      "clientDataPoints": {"internships": "Mandatory"},
      "competitorDataPoints": {}
    },
  ]
}
```"""

SAMPLE_VISIBILITY = """## Top Engineering Colleges in Delhi NCR

1. **Delhi Technological University** (NIRF #27): Strong placements and research.
   Average package around 12 LPA.
2. **Netaji Subhas University of Technology** – Excellent faculty and campus.

### Good Private Options

3. **XYZ Institute of Tech** (Rank #3): Affordable fees, good industry tie-ups.
4. Unknown Academy of Arts: Not an engineering college.

Sources: Shiksha, Careers360, NIRF rankings.
"""

SAMPLE_DETAIL = """{
  "collegeName": "XYZ Institute of Technology",
  "placements": {"placementRate": "92%", "averagePackage": "6.5 LPA",
                 "highestPackage": "24 LPA", "topRecruiters": ["Microsoft", "Amazon"],
                 "batchYear": 2024},
  "fees": {"btechAnnual": "1.8 lakh", "hostel": "N/A", "totalProgram": "7.2 lakh"},
  "accreditation": {"naacGrade": "A+", "nirfRank": null, "nbaAccredited": "true",
                    "ugcRecognized": false},
  "faculty": "not available",
  "infrastructure": {"campusSize": "25 acres", "facilities": ["Library", "Labs", ""],
                     "hostelAvailable": true},
  "reviews": {"overallSentiment": "positive", "averageRating": 4.1},
  "sources": ["https://www.careers360.com/xyz", "Shiksha"]
}"""


def _print_json(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _read(path: str) -> str:
    with open(path, encoding="utf-8") as fh:
        return fh.read()


def demo():
    """
    Parse the bundled sample responses through all three pipelines and
    print a formatted report to stdout.
    """
    from utils.pipeline import (
        parse_comparison_response, parse_visibility_response, parse_detail_response,
    )

    logger.info(f"=== {settings.APP_NAME} — Demo Run ===")

    analysis = parse_comparison_response(
        SAMPLE_COMPARISON, "XYZ Institute of Technology", "ABC Engineering College"
    )

    print("\n" + "=" * 70)
    print("  COLLEGE COMPARISON REPORT")
    print("=" * 70)
    print(f"  Overall winner : {analysis.overall_winner}")
    print(f"  Client score   : {analysis.client_weighted_score:.1f}")
    print(f"  Competitor     : {analysis.competitor_weighted_score:.1f}")
    print("=" * 70)

    print("\n📊 FEATURE BATTLES")
    print("-" * 70)
    for battle in analysis.features:
        print(f"  {battle.feature_name:<20} {battle.winner:<11} ({battle.confidence_level})")
        if battle.data_gap_identified:
            print(f"       Gap: {battle.data_gap_identified}")
    print(f"\n  {analysis.summary}")

    visibility = parse_visibility_response(
        SAMPLE_VISIBILITY,
        [
            "Delhi Technological University",
            "Netaji Subhas University of Technology",
            "XYZ Institute of Technology",
        ],
    )

    print("\n🏆 RANKED MENTIONS")
    print("-" * 70)
    for mention in visibility.mentions:
        print(f"  #{mention.rank:<3} {mention.name:<42} [{mention.section_tier}]")
        print(f"       signal {mention.signal_score}, richness {mention.response_richness_score}/10")
    print(f"\n  Entries detected : {visibility.entries_detected}")
    print(f"  Sources cited    : {', '.join(visibility.sources_cited) or 'none'}")
    print(f"  Ranking factors  : {', '.join(visibility.ranking_factors) or 'none'}")

    profile = parse_detail_response(SAMPLE_DETAIL, "XYZ Institute")

    print("\n📋 DETAIL PROFILE")
    print("-" * 70)
    print(f"  College      : {profile.college_name}")
    print(f"  Completeness : {profile.data_completeness_score}% "
          f"({profile.fields_populated}/{profile.fields_total})")
    print(f"  Missing      : {', '.join(profile.missing_fields) or 'none'}")
    print("=" * 70)

    return analysis, visibility, profile


def compare(path: str, client_name: str, competitor_name: str):
    from utils.pipeline import parse_comparison_response
    _print_json(parse_comparison_response(_read(path), client_name, competitor_name).to_dict())


def visibility(path: str, known_names):
    from utils.pipeline import parse_visibility_response
    _print_json(parse_visibility_response(_read(path), known_names).to_dict())


def detail(path: str, college_name: str):
    from utils.pipeline import parse_detail_response
    _print_json(parse_detail_response(_read(path), college_name).to_dict())


def run_tests():
    """Run pytest."""
    import subprocess
    result = subprocess.run(
        ["pytest", "tests/", "-v", "--tb=short"],
        cwd=os.path.dirname(os.path.abspath(__file__)),
    )
    sys.exit(result.returncode)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=settings.APP_NAME)
    commands = parser.add_subparsers(dest="command")

    commands.add_parser("demo", help="Parse the bundled sample responses")

    compare_cmd = commands.add_parser("compare", help="Parse a saved comparison response")
    compare_cmd.add_argument("file")
    compare_cmd.add_argument("client")
    compare_cmd.add_argument("competitor")

    visibility_cmd = commands.add_parser("visibility", help="Extract ranked mentions of known colleges")
    visibility_cmd.add_argument("file")
    visibility_cmd.add_argument("names", nargs="+", metavar="NAME")

    detail_cmd = commands.add_parser("detail", help="Parse a saved detail response")
    detail_cmd.add_argument("file")
    detail_cmd.add_argument("name")

    commands.add_parser("test", help="Run the test suite")
    return parser


if __name__ == "__main__":
    args = build_parser().parse_args()

    if args.command in (None, "demo"):
        demo()
    elif args.command == "compare":
        compare(args.file, args.client, args.competitor)
    elif args.command == "visibility":
        visibility(args.file, args.names)
    elif args.command == "detail":
        detail(args.file, args.name)
    elif args.command == "test":
        run_tests()
