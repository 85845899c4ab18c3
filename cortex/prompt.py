from typing import List

from cortex.domain.note import Note, SimilarNote

CLASSIFICATION_PROMPT_TEMPLATE = """Assess meaningful graph relationships between a new note and candidate notes.

New note:
Title: "{title}"
Content: {content}
Tags: {tags}

Candidates:
{candidates}

For each candidate that is genuinely related, give the candidate id, a label
(supports, contradicts, follows_from, expands_on or related_to), a strength
between 0.0 and 1.0 and one short sentence of reasoning. Skip candidates
without a meaningful relationship."""

TOPIC_SUMMARY_INSTRUCTION = (
    "Synthesize these notes into a coherent summary and flag contradictions, "
    "tensions, and open questions."
)


def get_candidate_context(candidates: List[SimilarNote], preview_chars: int) -> str:
    lines = []
    for i, candidate in enumerate(candidates, start=1):
        title = candidate.title or "Untitled"
        preview = candidate.content[:preview_chars]
        lines.append(f'[{i}] (id: {candidate.id}) "{title}": {preview}')
    return "\n".join(lines)


def get_classification_prompt(
    *,
    note: Note,
    candidates: List[SimilarNote],
    preview_chars: int,
) -> str:
    return CLASSIFICATION_PROMPT_TEMPLATE.format(
        title=note.title or "Untitled",
        content=note.content,
        tags=", ".join(note.tags),
        candidates=get_candidate_context(candidates, preview_chars),
    )
