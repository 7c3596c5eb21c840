"""Timing utilities"""


async def settle(page, ms):
    """Let client-side re-renders catch up after navigation, clicks or typing"""
    if ms and ms > 0:
        await page.wait_for_timeout(ms)
