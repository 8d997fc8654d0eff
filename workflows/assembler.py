"""Turn groups into output PDFs.

Each effective group becomes one output. All excluded pages of the run,
whichever envelope they came from, go into a single aggregate output named
EXCLUDED_FILE_NAME. A failed extraction is recorded and reported but never
stops the other outputs.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from mailsort import MailSort
from .naming import EXCLUDED_FILE_NAME, assign_file_names, name_for_group
from .page_metadata import AssemblyFailure, Group, Manifest, OutputDocument
from .page_source import PageSource


@dataclass(frozen=True)
class PlannedOutput:
    """An output whose name and pages are known but whose bytes are not yet built."""

    id: int
    file_name: str
    page_numbers: Tuple[int, ...]
    is_excluded: bool = False


def plan_outputs(groups: Sequence[Group]) -> List[PlannedOutput]:
    """Name every output and assign page numbers, in emission order.

    Effective groups come first (one output each, collision-numbered), then the
    aggregate excluded output if any group holds excluded pages.
    """
    effective = [g for g in groups if not g.is_excluded_data]
    excluded_pages = sorted(n for g in groups if g.is_excluded_data for n in g.page_numbers)

    reserved = [EXCLUDED_FILE_NAME] if excluded_pages else []
    names = assign_file_names([name_for_group(g) for g in effective], reserved=reserved)

    plan = [
        PlannedOutput(id=i, file_name=name, page_numbers=tuple(sorted(group.page_numbers)))
        for i, (group, name) in enumerate(zip(effective, names))
    ]

    if excluded_pages:
        plan.append(PlannedOutput(
            id=len(plan),
            file_name=EXCLUDED_FILE_NAME,
            page_numbers=tuple(excluded_pages),
            is_excluded=True,
        ))

    return plan


def assemble_outputs(groups: Sequence[Group], source: PageSource,
                     max_workers: int = 1) -> Manifest:
    """Extract the pages of every planned output from the source document.

    Args:
        groups: Groups from group_pages(), in emission order
        source: Page source for the bundle the groups were built from
        max_workers: Number of extractions to run at once (1 = sequential)

    Returns:
        Manifest with the successful outputs in emission order and a failure
        entry for every output that could not be extracted.
    """
    plan = plan_outputs(groups)
    results: List[Optional[bytes]] = [None] * len(plan)
    errors: List[Optional[Exception]] = [None] * len(plan)

    def extract(index: int) -> None:
        try:
            results[index] = source.extract_pages(list(plan[index].page_numbers))
        except Exception as e:
            errors[index] = e

    if max_workers > 1 and len(plan) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            list(executor.map(extract, range(len(plan))))
    else:
        for index in range(len(plan)):
            extract(index)

    manifest = Manifest()
    for planned, data, error in zip(plan, results, errors):
        if error is not None:
            pages = list(planned.page_numbers)
            MailSort.print_right(
                f"[red]✗ Failed to extract {planned.file_name} (pages {pages}): {error}[/red]"
            )
            manifest.failures.append(AssemblyFailure(
                output_id=planned.id,
                file_name=planned.file_name,
                page_numbers=pages,
                error=str(error),
            ))
            continue

        manifest.outputs.append(OutputDocument(
            id=planned.id,
            file_name=planned.file_name,
            page_numbers=list(planned.page_numbers),
            is_excluded=planned.is_excluded,
            data=data,
        ))

    return manifest
