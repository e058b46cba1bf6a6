"""Main script for running the trust checker."""

import asyncio
import logging

from .domain.models.report import AggregateReport
from .infrastructure.dependencies import ServiceContainer


def print_report(report: AggregateReport) -> None:
    """Print a report in a readable form."""
    print("\nResults:")
    if report.error:
        print(f"Error: {report.error}")
        return
    print(f"Title: {report.title or '-'}")
    print(f"Category: {report.category}")
    print(f"Verdict: {report.verdict_label.value} ({report.overall_score:.0%})")
    print(f"Average trust score: {report.average_trust_score:.1f}")

    print("\nClaims:")
    for i, item in enumerate(report.claims, 1):
        result = item.result
        print(f"{i}. [{result.verdict.value}, {result.trust_score:.0f}] {item.claim.text}")
        for quote in result.reference_quotes:
            print(f"     \"{quote}\"")


async def main():
    """Run the trust checker."""
    logging.basicConfig(level=logging.WARNING)
    print("Trust Checker - evidence-based verification of web articles")
    print("-----------------------------------------------------------")

    container = ServiceContainer()
    try:
        try:
            coordinator = await container.get_pipeline_coordinator()
        except RuntimeError as e:
            print(f"\nCannot start: {e}")
            return

        while True:
            # Get URL from user
            url = input("\nEnter an article URL to check (or 'quit' to exit): ").strip()
            if url.lower() in ('quit', 'exit', 'q'):
                break
            if not url:
                continue

            print("\nChecking article...")
            try:
                report = await coordinator.run(url)
                print_report(report)
                if report.error is None:
                    container.get_history().add(report)
            except Exception as e:
                print(f"\nError checking article: {e}")

    finally:
        # Clean up
        await container.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
