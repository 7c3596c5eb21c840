"""Platform identification and adapter dispatch"""

import logging
from urllib.parse import urlsplit

from ats_autofill import config
from ats_autofill.platforms.ashby import autofill_ashby
from ats_autofill.platforms.greenhouse import autofill_greenhouse
from ats_autofill.platforms.lever import autofill_lever

log = logging.getLogger(__name__)

ADAPTERS = {
    "ashby": autofill_ashby,
    "greenhouse": autofill_greenhouse,
    "lever": autofill_lever,
}


def detect_platform(url):
    """Adapter name for a job URL by hostname, or None for unknown hosts"""
    if not url:
        return None
    host = urlsplit(url if "//" in url else f"//{url}").hostname or ""
    for needle, platform in config.ATS_HOSTS.items():
        if needle in host:
            return platform
    return None


async def autofill_page(page, profile, **kwargs):
    """
    Run the adapter matching the page's hostname.

    Returns the adapter's AutofillReport, or None (page untouched) when the
    host is not a supported ATS.
    """
    platform = detect_platform(page.url)
    if platform is None:
        log.warning("⏭️ Unsupported ATS host, skipping: %s", page.url)
        return None
    log.info("Detected %s for %s", platform, page.url)
    return await ADAPTERS[platform](page, profile, **kwargs)
