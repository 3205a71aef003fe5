# petconnect/client/feed.py

from typing import Dict, Any, List

from petconnect.utils.datetime_utils import DateTimeUtils

TAB_LATEST = 'latest'
TAB_TRENDING = 'trending'


def _matches_query(post: Dict[str, Any], query: str) -> bool:
    for key in ('caption', 'username', 'pet_name'):
        value = post.get(key)
        if value and query in value.lower():
            return True
    return False


def filter_feed(posts: List[Dict[str, Any]], query: str = "", animal_type: str = "",
                tab: str = TAB_LATEST) -> List[Dict[str, Any]]:
    """
    Filtered and sorted view of a post list. Recomputed from scratch on every call;
    the input list is left untouched.

    - query: case-insensitive substring of caption, username or pet name
    - animal_type: must equal one of the post's tags (case-insensitive)
    - tab: 'trending' sorts by like count, anything else by created_at (newest first)
    """
    query = query.strip().lower()
    animal_type = animal_type.strip().lower()

    result = list(posts)
    if query:
        result = [p for p in result if _matches_query(p, query)]
    if animal_type:
        result = [p for p in result if animal_type in [t.lower() for t in p.get('tags') or []]]

    if tab == TAB_TRENDING:
        result.sort(key=lambda p: len(p.get('likes') or []), reverse=True)
    else:
        result.sort(key=lambda p: DateTimeUtils.coerce_datetime(p.get('created_at')), reverse=True)
    return result
