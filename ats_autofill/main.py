#!/usr/bin/env python3
"""
ATS Autofill - fill Ashby / Greenhouse / Lever application forms from a profile.

The browser stays open after each form so a human can review and submit.
Nothing here ever submits an application.
"""

import argparse
import asyncio
import json
import logging
import time

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from ats_autofill import config
from ats_autofill.browser.session import launch_browser
from ats_autofill.data.profile import Profile
from ats_autofill.platforms.detect import autofill_page, detect_platform
from ats_autofill.utils.logging import log_result, setup_logging

log = logging.getLogger("ats_autofill.main")


def format_elapsed_time(seconds):
    """Format elapsed time in human-readable format"""
    if seconds < 60:
        return f"{seconds:.1f}s"
    mins = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{mins}m {secs}s"


def load_job_links(file_path):
    """Load job URLs from file, one per line. Strips comments and deduplicates."""
    with open(file_path, "r", encoding="utf-8") as f:
        urls = []
        seen = set()
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and line not in seen:
                urls.append(line)
                seen.add(line)
        return urls


def load_profile(path):
    with open(path, "r", encoding="utf-8") as f:
        return Profile.from_dict(json.load(f))


async def fill_one(page, url, profile, timing):
    """Navigate to one job URL, autofill it and append the run log line"""
    start = time.time()
    platform = detect_platform(url)
    if platform is None:
        log.warning("⏭️ Not a supported ATS URL: %s", url)
        return log_result(url, None, "UNSUPPORTED")

    try:
        await page.goto(url, wait_until="domcontentloaded")
    except PlaywrightError as e:
        log.error("Could not open %s: %s", url, str(e).splitlines()[0])
        return log_result(url, platform, "FAILED")

    report = await autofill_page(page, profile, timing=timing)
    if report is None:
        # Redirected off the ATS host, e.g. to a careers site embedding ?gh_jid=
        return log_result(page.url, platform, "UNSUPPORTED")
    log.info("⏱️  %s in %s", platform, format_elapsed_time(time.time() - start))
    for outcome in report.failed:
        log.warning("  ⚠️ %s", outcome)
    return log_result(page.url, platform, "FILLED", report)


async def run(urls, profile, timing_name=None, headless=False):
    timing = config.get_active_timing(timing_name)
    async with async_playwright() as p:
        context, page = await launch_browser(p, headless=headless)
        try:
            for idx, url in enumerate(urls, start=1):
                log.info("[%d/%d] %s", idx, len(urls), url)
                await fill_one(page, url, profile, timing)
                if not headless:
                    prompt = (
                        "Review the form, then press Enter for the next job..."
                        if idx < len(urls)
                        else "Review and submit manually, then press Enter to close browser..."
                    )
                    await asyncio.to_thread(input, prompt)
        finally:
            await context.close()


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Autofill ATS job application forms (never submits)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Supported hosts: *.ashbyhq.com, *.greenhouse.io, jobs.lever.co

Examples:
  python -m ats_autofill.main "https://jobs.ashbyhq.com/acme/1234" --profile profile.json
  python -m ats_autofill.main --links-file jobs.txt --profile profile.json --timing constrained
        """,
    )
    parser.add_argument("job_url", nargs="?", help="Application URL to autofill")
    parser.add_argument("--links-file", help="File containing job URLs (one per line)")
    parser.add_argument("--profile", default="profile.json", help="Candidate profile JSON")
    parser.add_argument(
        "--timing",
        choices=sorted(config.TIMING_PROFILES),
        help=f"Timing profile (default: ${config.TIMING_ENV_VAR}, else by OS)",
    )
    parser.add_argument("--headless", action="store_true", help="Run without a visible browser")
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    args = parser.parse_args(argv)

    setup_logging(args.log_level.upper() if args.log_level else None)

    if args.links_file:
        urls = load_job_links(args.links_file)
    elif args.job_url:
        urls = [args.job_url]
    else:
        parser.error("a job URL or --links-file is required")
    if not urls:
        parser.error("no job URLs to process")

    profile = load_profile(args.profile)
    asyncio.run(run(urls, profile, timing_name=args.timing, headless=args.headless))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
