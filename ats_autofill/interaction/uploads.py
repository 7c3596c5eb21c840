"""File uploads"""

import logging
from pathlib import Path

from playwright.async_api import Error as PlaywrightError

from ats_autofill.perception.locators import safe_count
from ats_autofill.state import outcome as result

log = logging.getLogger(__name__)

FILE_INPUT = "input[type='file']"


async def upload_file(ctx, field, path, selector=FILE_INPUT):
    """
    Offer the file to every matching file input in order until one accepts it.

    Pages often render several hidden file inputs (cover letter, avatar...),
    so a rejection just moves on to the next one.
    """
    if not path:
        return ctx.record(result.no_value(field))
    if not Path(path).is_file():
        ctx.warn("%s file does not exist: %s", field, path)
        return ctx.record(result.no_value(field, f"missing file {path}"))

    inputs = ctx.page.locator(selector)
    count = await safe_count(inputs)
    if count == 0:
        return ctx.record(result.not_found(field, "no file input"))

    for idx in range(count):
        try:
            await inputs.nth(idx).set_input_files(path, timeout=ctx.wait("upload"))
        except PlaywrightError as e:
            log.debug("File input #%d rejected %s: %s", idx, path, e)
            continue
        return ctx.record(result.filled(field, f"file input #{idx}"))

    return ctx.record(result.interaction_failed(field, f"{count} file inputs rejected the file"))
