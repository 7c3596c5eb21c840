"""Browser session management"""

import logging

from ats_autofill import config

log = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


async def launch_browser(playwright, user_data_dir=None, headless=False):
    """
    Launch a persistent Chromium context and return (context, page).
    Reuses cookies and ATS logins across runs.
    """
    user_data_dir = str(user_data_dir or config.BROWSER_DATA_DIR)
    log.info("Launching browser (profile dir %s)...", user_data_dir)

    context = await playwright.chromium.launch_persistent_context(
        user_data_dir=user_data_dir,
        headless=headless,
        args=[
            "--disable-blink-features=AutomationControlled",
            "--disable-features=site-per-process",
        ],
        user_agent=USER_AGENT,
    )

    page = context.pages[0] if context.pages else await context.new_page()
    return context, page
