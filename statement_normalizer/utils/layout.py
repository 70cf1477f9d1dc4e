"""
Reading-order reconstruction for positioned text.

PDF text comes out as fragments with page coordinates. Fragments that share
a (rounded) baseline belong to one line; lines run top to bottom and
fragments within a line run left to right.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Sequence, Tuple, Union

from statement_normalizer.models import TextFragment


FragmentLike = Union[TextFragment, Tuple[str, float, float]]


def _as_fragment(item: FragmentLike) -> TextFragment:
    if isinstance(item, TextFragment):
        return item
    text, x, y = item
    return TextFragment(str(text), float(x), float(y))


def reconstruct_page(fragments: Iterable[FragmentLike]) -> List[str]:
    """
    Rebuild the lines of one page.

    Args:
        fragments: (text, x, y) fragments, y growing upwards

    Returns:
        Lines in reading order
    """
    buckets: Dict[int, List[TextFragment]] = defaultdict(list)
    for item in fragments:
        fragment = _as_fragment(item)
        if not fragment.text.strip():
            continue
        buckets[round(fragment.y)].append(fragment)

    lines = []
    for y in sorted(buckets, reverse=True):
        # sorted() is stable, equal x keeps input order
        row = sorted(buckets[y], key=lambda f: f.x)
        lines.append(' '.join(f.text for f in row))
    return lines


def reconstruct_text(pages: Sequence[Iterable[FragmentLike]]) -> str:
    """Rebuild flat statement text from all pages, one line per row."""
    lines: List[str] = []
    for page in pages:
        lines.extend(reconstruct_page(page))
    return '\n'.join(lines)
