from pathlib import Path

from docaudit.analysis.exceptions import AnalysisError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"

TAXONOMY: dict[str, str] = {
    "budget": "Budget discrepancies, financial inconsistencies, conflicting amounts or payment terms",
    "legal": "Conflicting terms, liability clauses, or obligations",
    "compliance": "Regulatory or certification requirements stated inconsistently or unmet",
    "version": "Outdated information or conflicts between document versions",
    "deadline": "Conflicting dates, milestones, or timing inconsistencies",
    "data": "Data inconsistencies, calculation errors, or mismatched details",
}


def format_taxonomy() -> str:
    return "\n".join(f"   - {name}: {description}" for name, description in TAXONOMY.items())


def load_prompt(name: str, prompt_dir: Path | None = None) -> str:
    """Load a bundled prompt template by file stem.

    Raises:
        AnalysisError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / f"{name}.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AnalysisError(f"Failed to load prompt template: {exc}") from exc
