"""Identity resolution between requests and download events"""

from informarr.media.request import MediaIdentifiers


def matches(a: MediaIdentifiers, b: MediaIdentifiers) -> bool:
    """
    Whether two identifier pairs designate the same media item.

    The primary ids are compared first; the secondary ids are a fallback used
    only when both sides carry one, since Sonarr and the request portal do not
    agree on which id they populate reliably. Absent ids never match.
    """

    if a.primary_id is not None and a.primary_id == b.primary_id:
        return True

    return a.secondary_id is not None and a.secondary_id == b.secondary_id
