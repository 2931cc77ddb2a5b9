"""Split orchestration: every source run → one group of word units.

WHY: The tokenizer and layout engine work on one run at a time. A split
operation covers every run collected from the selection, drops empty ones,
gives each non-empty run its own output group in the target container, and
reports a single total back to the caller.

HOW: For each run, tokenize its contents; skip it when there is nothing to
lay out; otherwise create a group in the injected container and lay the
tokens out from the shared anchor. Runs are processed strictly in order.

RULES:
- The output container is passed in; nothing here looks it up
- Empty contents or an empty token list → run skipped, counted, logged
- One group per non-empty run, named "SplitWords_<n>" (n counts up from 1
  across the container, so repeated splits never reuse a name)
- Groups are appended, so the newest group sits in front
- Every run starts at the same anchor
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from word_splitter.config import GROUP_NAME_PREFIX, LayoutConfig
from word_splitter.core.ir import OutputContainer, OutputGroup, SourceTextRun, SplitResult
from word_splitter.core.layout import layout_run
from word_splitter.core.measure import MeasurementAdapter, TextHost
from word_splitter.core.tokenizer import tokenize

logger = logging.getLogger(__name__)


def _next_group_name(container: OutputContainer) -> str:
    taken = {g.name for g in container.groups}
    n = len(container.groups) + 1
    while "{}{}".format(GROUP_NAME_PREFIX, n) in taken:
        n += 1
    return "{}{}".format(GROUP_NAME_PREFIX, n)


def split_runs(
    runs: Sequence[SourceTextRun],
    host: TextHost,
    container: OutputContainer,
    anchor: Tuple[float, float],
    config: Optional[LayoutConfig] = None,
) -> SplitResult:
    """Split every run into word units inside ``container``.

    Args:
        runs: Source runs in processing order.
        host: Rendering host used for all width measurements.
        container: Destination layer; one group is appended per laid-out run.
        anchor: (left, top) where every run starts.
        config: Layout knobs. Defaults to LayoutConfig().

    Returns:
        SplitResult with the new groups and the number of units created.
    """
    config = config or LayoutConfig()
    adapter = MeasurementAdapter(host, config)

    groups: List[OutputGroup] = []
    total = 0
    skipped = 0

    for run in runs:
        label = run.name or "<unnamed>"
        if not run.contents:
            logger.info("Skipping run %s: no contents", label)
            skipped += 1
            continue

        tokens = tokenize(run.contents)
        if not tokens:
            logger.info("Skipping run %s: no tokens", label)
            skipped += 1
            continue

        group = container.add_group(_next_group_name(container), source_name=run.name)
        layout = layout_run(run, tokens, adapter, anchor, group=group, config=config)
        logger.debug("Run %s: %d tokens → %d word units", label, len(tokens), len(layout.units))

        groups.append(group)
        total += len(layout.units)

    return SplitResult(
        layer_name=container.name,
        groups=groups,
        total_words=total,
        anchor=anchor,
        skipped_runs=skipped,
    )


def summary_message(result: SplitResult) -> str:
    """The single end-of-operation line shown to the user."""
    return "Created {} word blocks on layer: {}".format(result.total_words, result.layer_name)
