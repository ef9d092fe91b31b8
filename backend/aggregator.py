from typing import Iterable, NamedTuple

from schemas import DaySummary, LunchResponse, NoRow, YesRow


class Partition(NamedTuple):
    yes: list[LunchResponse]
    no: list[LunchResponse]


def partition(responses: Iterable[LunchResponse]) -> Partition:
    """Split responses by answer, keeping input order. Unset answers fall in neither group."""
    yes, no = [], []
    for response in responses:
        if response.answer == "yes":
            yes.append(response)
        elif response.answer == "no":
            no.append(response)
    return Partition(yes=yes, no=no)


def render_intervals(response: LunchResponse) -> list[str]:
    return [f"{interval.start} - {interval.end}" for interval in response.intervals]


def summarize(day: str, responses: Iterable[LunchResponse]) -> DaySummary:
    """Build the display view: yes rows carry rendered intervals, no rows only the name."""
    groups = partition(responses)
    return DaySummary(
        day=day,
        yes=[YesRow(name=r.name, intervals=render_intervals(r)) for r in groups.yes],
        no=[NoRow(name=r.name) for r in groups.no],
    )
