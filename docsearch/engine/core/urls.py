"""Documentation link construction from a source's URL template.

Links are presentation only and never feed into ranking.
"""

import logging
import re
from urllib.parse import quote

from ...models.enums import AnchorStyle
from ...models.metadata import SourceDescriptor
from .document import CandidateDocument

logger = logging.getLogger(__name__)

_DOC_EXTENSION_RE = re.compile(r"\.(?:mdx?|html?)$", re.IGNORECASE)


def heading_anchor(heading: str, style: AnchorStyle) -> str:
    """Convert a heading into the anchor format used by a documentation site."""
    if style == AnchorStyle.CUSTOM:
        return heading.strip()
    slug = re.sub(r"[^\w\s-]", "", heading.strip().lower())
    slug = re.sub(r"\s+", "-", slug)
    if style == AnchorStyle.DOCSIFY:
        slug = re.sub(r"-+", "-", slug).strip("-")
    return slug


def build_document_url(source: SourceDescriptor, candidate: CandidateDocument) -> str | None:
    """Build the documentation URL for a candidate.

    Placeholders in ``source.url_template``:
        - ``{file}``: relative file path without its .md/.mdx/.html extension
        - ``{name}``: file name without directory or extension
        - ``{id}``: document id with the library prefix removed
        - ``{library}``: library id without the leading slash

    Section documents (heading level 2 or deeper) get an anchor derived from
    their title according to ``source.anchor_style``.

    Args:
        source: Descriptor of the candidate's source
        candidate: Candidate document

    Returns:
        The URL, or None when the source has no template or a placeholder
        cannot be filled.
    """
    template = source.url_template
    if not template:
        return None

    rel_file = candidate.rel_file or ""
    if ("{file}" in template or "{name}" in template) and not rel_file:
        logger.debug(f"No relative file for {candidate.id}, cannot fill {template}")
        return None

    file_path = _DOC_EXTENSION_RE.sub("", rel_file).lstrip("/")
    library = (source.library_id or "").lstrip("/")
    doc_id = candidate.id
    if source.library_id and doc_id.startswith(source.library_id):
        doc_id = doc_id[len(source.library_id) :].lstrip("/")

    url = (
        template.replace("{file}", quote(file_path))
        .replace("{name}", quote(file_path.rsplit("/", 1)[-1]))
        .replace("{id}", quote(doc_id))
        .replace("{library}", quote(library))
    )

    if candidate.heading_level is not None and candidate.heading_level >= 2 and candidate.title:
        anchor = heading_anchor(candidate.title, source.anchor_style)
        if anchor:
            separator = "?id=" if source.anchor_style == AnchorStyle.DOCSIFY else "#"
            url = f"{url}{separator}{anchor}"

    return url
