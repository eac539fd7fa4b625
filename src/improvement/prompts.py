"""Difficulty-specific improvement prompts."""
from typing import List

from schemas.enums import Difficulty
from schemas.question import QuestionRecord

# (reviewer level, goals, JSON field hints) per difficulty
_PROFILES = {
    Difficulty.BEGINNER: (
        "a beginner-level question",
        [
            "Tests fundamental understanding",
            "Includes practical context",
            "Has clear, concise answer",
            "Provides detailed explanation with code examples",
            "Includes a helpful diagram",
        ],
        {
            "question": "improved interview question",
            "answer": "improved concise answer under 150 characters",
            "explanation": "improved detailed markdown explanation with code examples and best practices",
            "diagram": "improved mermaid diagram (graph TD or LR)",
        },
    ),
    Difficulty.INTERMEDIATE: (
        "an intermediate-level question",
        [
            "Tests practical application and trade-offs",
            "Includes real-world scenario",
            "Has answer highlighting key trade-offs",
            "Provides comprehensive explanation with multiple approaches",
            "Includes architectural diagram",
        ],
        {
            "question": "improved interview question with scenario",
            "answer": "improved answer with trade-offs under 150 characters",
            "explanation": "improved detailed markdown with code examples, trade-offs, and best practices",
            "diagram": "improved mermaid diagram (graph TD, LR, or sequenceDiagram)",
        },
    ),
    Difficulty.ADVANCED: (
        "an advanced-level question",
        [
            "Tests deep system thinking",
            "Includes complex real-world scenario with constraints",
            "Has answer highlighting architectural decisions",
            "Provides comprehensive explanation with multiple solutions",
            "Includes detailed system diagram",
        ],
        {
            "question": "improved interview question with complex scenario",
            "answer": "improved answer with architectural decisions under 150 characters",
            "explanation": "improved comprehensive markdown with multiple approaches, scalability, code examples",
            "diagram": "improved detailed mermaid diagram (graph TD, LR, sequenceDiagram, or C4Context)",
        },
    ),
}


def build_improvement_prompt(record: QuestionRecord, issues: List[str]) -> str:
    """
    Build the generation prompt for one question.

    Questions without a difficulty are treated as intermediate.
    """
    difficulty = record.difficulty or Difficulty.INTERMEDIATE
    level, goals, fields = _PROFILES[difficulty]

    lines = [
        f"You are a senior technical interviewer reviewing {level}.",
        "",
        f'Current Question: "{record.question}"',
        f'Current Answer: "{record.answer or ""}"',
        f'Current Explanation: "{record.explanation or ""}"',
        f"Issues to fix: {', '.join(issues)}",
        "",
        "Improve this to be a realistic interview question that:",
    ]
    lines.extend(f"- {goal}" for goal in goals)
    lines.append("- Ends with a question mark")
    lines.append("")
    lines.append("Return ONLY valid JSON (no markdown, no extra text):")
    lines.append("{")
    entries = [f'  "{key}": "{hint}"' for key, hint in fields.items()]
    lines.append(",\n".join(entries))
    lines.append("}")

    return "\n".join(lines)
