"""Heuristic matching of calendar events to dashboard items."""

from dashlink.models.event import CalendarEvent
from dashlink.models.link import CandidateLink, LinkType
from dashlink.models.snapshot import DashboardItem, DashboardSnapshot

EXPERIENCE_PHRASE_WORDS = 3


def travel_token(name: str) -> str:
    """First whitespace-delimited token of a destination name, lowercased."""
    words = name.lower().split()
    return words[0] if words else ""


def experience_phrase(title: str) -> str:
    """First three words of an experience title, lowercased."""
    return " ".join(title.lower().split()[:EXPERIENCE_PHRASE_WORDS])


def _candidate(link_type: LinkType, item: DashboardItem) -> CandidateLink:
    return CandidateLink(type=link_type, item_id=item.id, name=item.name)


def match_event(
    event: CalendarEvent, snapshot: DashboardSnapshot
) -> list[CandidateLink]:
    """
    Propose links between an event and dashboard items.

    All tests are case-insensitive substring checks and are evaluated
    independently, so one event may link to several items:

    - travel: first word of the destination name appears in the summary
    - local: full place name appears in the summary or the location
    - experience: first three words of the experience appear in the summary

    Args:
        event: Parsed calendar event
        snapshot: Dashboard records to match against

    Returns:
        Candidate links in travel, local, experience order
    """
    summary = event.summary.lower()
    location = (event.location or "").lower()
    candidates: list[CandidateLink] = []

    for destination in snapshot.destinations:
        token = travel_token(destination.name)
        if token and token in summary:
            candidates.append(_candidate(LinkType.TRAVEL, destination))

    for place in snapshot.places:
        name = place.name.lower().strip()
        if name and (name in summary or name in location):
            candidates.append(_candidate(LinkType.LOCAL, place))

    for experience in snapshot.experiences:
        phrase = experience_phrase(experience.name)
        if phrase and phrase in summary:
            candidates.append(_candidate(LinkType.EXPERIENCE, experience))

    return candidates
