"""
Listing Sort Module

Client-side ordering of the profiles on the current result page. Sorting is a
pure projection: the result page is never mutated, and ties keep the order
the server returned them in.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional

from data.models import ProfileSummary, SortField, SortOrder, SortSpec

# Order applied when a column is selected for the first time
DEFAULT_SORT_ORDERS: Dict[SortField, SortOrder] = {
    SortField.USERNAME: SortOrder.ASCENDING,
    SortField.CATEGORY: SortOrder.ASCENDING,
    SortField.FOLLOWERS: SortOrder.DESCENDING,
    SortField.POSTS: SortOrder.DESCENDING,
    SortField.ENGAGEMENT: SortOrder.DESCENDING,
}

SORT_KEYS: Dict[SortField, Callable[[ProfileSummary], Any]] = {
    SortField.USERNAME: lambda p: p.username.lower(),
    SortField.FOLLOWERS: lambda p: p.followers_count,
    SortField.POSTS: lambda p: p.posts_count,
    SortField.ENGAGEMENT: lambda p: p.display_engagement,
    SortField.CATEGORY: lambda p: p.category_name or "",
}


def sort_profiles(profiles: Iterable[ProfileSummary],
                  sort_spec: Optional[SortSpec]) -> List[ProfileSummary]:
    """
    Return the profiles ordered by the given sort spec.

    Args:
        profiles: Profiles in server order.
        sort_spec: Column and direction, or None to keep server order.

    Returns:
        A new list; the input is left untouched.
    """
    ordered = list(profiles)
    if sort_spec is None:
        return ordered

    key = SORT_KEYS[sort_spec.field]
    # sorted() is stable for reverse=True as well
    return sorted(ordered, key=key, reverse=sort_spec.order is SortOrder.DESCENDING)


def next_sort_spec(current: Optional[SortSpec], field: SortField) -> SortSpec:
    """
    Work out the sort spec after the user selects a column.

    Selecting the active column toggles its order; selecting another column
    applies that column's default order.
    """
    if current is not None and current.field is field:
        return SortSpec(field=field, order=current.order.toggled())
    return SortSpec(field=field, order=DEFAULT_SORT_ORDERS[field])
