"""Prompt construction for syllabus assignment extraction."""

from __future__ import annotations

from syllabug.extraction.models import ExtractionRequest

# Hard cap on document characters sent to the model
MAX_PROMPT_CHARS = 15_000

TRUNCATION_MARKER = "... [text truncated]"

SYSTEM_PROMPT = "You are a helpful assistant that extracts assignment information from syllabi."

EXTRACTION_TEMPLATE = """You are an intelligent assistant that extracts academic assignments from a syllabus.

The syllabus text may be structured or unstructured. Your task is to identify all student-facing deliverables, and return them in JSON format.

For each item, identify:
- `title`: Name of the deliverable
- `type`: One of ['assignment', 'quiz', 'exam', 'paper', 'project']
- `description`: A short summary if available
- `due_date`: The date it's due (in YYYY-MM-DD format)
- `start_date`: Only include this if the type is 'paper' or 'project', and the start date is mentioned

IMPORTANT: Your response MUST be a properly formatted JSON object containing an array called "items". The structure should look like this:

{
  "items": [
    {
      "title": "Final Project Presentation",
      "type": "project",
      "start_date": "2025-03-10",
      "due_date": "2025-04-01",
      "description": "Team presentation on final project findings."
    },
    {
      "title": "Quiz 2",
      "type": "quiz",
      "due_date": "2025-02-15",
      "description": "Covers chapters 4-6."
    }
  ]
}

Or if no assignments are found:
{
  "items": []
}

Tips for extracting dates:
- If a date is mentioned like "September 15", convert it to "2025-09-15" format.
- If a day of week is mentioned like "due Friday", look for context to determine the date.
- If relative dates are mentioned like "Week 3", try to resolve to an actual date if possible.
- If no year is specified, assume the current academic year (2025).
- IMPORTANT: Even if a date is unclear, make your best estimate rather than excluding the item.

Be generous in your extraction. Even if you're not 100% sure something is an assignment, include it if it has:
1. A title or clear description
2. Any mention of a due date or deadline
3. Language that suggests submission, completion, or evaluation

If you can't find any assignments at all, still return: {"items": []}

Now process the following syllabus text:

"""


def prepare_request(text: str, max_chars: int = MAX_PROMPT_CHARS) -> ExtractionRequest:
    """Bound the document text to ``max_chars`` characters.

    Anything past the cap is dropped and a marker is appended, so deliverables
    late in a very long syllabus may be missed.
    """
    if len(text) > max_chars:
        return ExtractionRequest(raw_text=text[:max_chars] + TRUNCATION_MARKER, truncated=True)
    return ExtractionRequest(raw_text=text, truncated=False)


def render_prompt(request: ExtractionRequest) -> str:
    return EXTRACTION_TEMPLATE + request.raw_text


def build_prompt(text: str, max_chars: int = MAX_PROMPT_CHARS) -> str:
    """Render the full extraction prompt for a syllabus.

    Args:
        text: Plain text recovered from the uploaded document.
        max_chars: Character ceiling applied before rendering.

    Returns:
        The instruction template followed by the (possibly truncated) text.
    """
    return render_prompt(prepare_request(text, max_chars))
