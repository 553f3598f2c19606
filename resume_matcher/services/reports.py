import os
from pathlib import Path
from typing import Tuple

import pandas as pd

from resume_matcher.models.response import MatchingRun

COLUMNS = [
    "application_id", "status", "score", "skills", "experience", "education",
    "keyword", "section", "low_confidence", "matched_skills", "suggestions",
]


def results_frame(run: MatchingRun) -> pd.DataFrame:
    data = [{
        "application_id": r.application_id,
        "status": r.status,
        "score": r.score,
        "skills": r.breakdown.skills,
        "experience": r.breakdown.experience,
        "education": r.breakdown.education,
        "keyword": r.breakdown.keyword,
        "section": r.breakdown.section,
        "low_confidence": r.low_confidence,
        "matched_skills": ", ".join(r.details.matched_skills),
        "suggestions": " | ".join(r.details.suggestions),
    } for r in run.results]
    df = pd.DataFrame(data, columns=COLUMNS)
    # stable sort keeps iteration order among equal scores
    return df.sort_values("score", ascending=False, kind="mergesort").reset_index(drop=True)


def write_reports(run: MatchingRun, report_dir: str) -> Tuple[str, str]:
    """Write `<job>_report.csv` (all results) and `<job>_top.md` (top 10) into `report_dir`."""
    Path(report_dir).mkdir(parents=True, exist_ok=True)
    df = results_frame(run)

    csv_path = os.path.join(report_dir, f"{run.job_id}_report.csv")
    df.to_csv(csv_path, index=False)  # headers only when there are no results

    md_lines = [f"# Job {run.job_id} - Top Matches"]
    if run.job_text_low_confidence:
        md_lines.append("*(Job text was built from job metadata; scores are low confidence)*\n")

    if len(df):
        md_lines += [
            "| Rank | Application | Status | Score | Skills | Experience | Education | Keyword | Section |",
            "|---:|---|---|---:|---:|---:|---:|---:|---:|",
        ]
        for i, r in enumerate(df.head(10).itertuples(), start=1):
            md_lines.append(
                f"| {i} | {r.application_id} | {r.status} | {r.score:.2f} | {r.skills:.2f} | "
                f"{r.experience:.2f} | {r.education:.2f} | {r.keyword:.2f} | {r.section:.2f} |"
            )
        md_lines.append("\n---\nSuggestions (top-5):")
        for r in df.head(5).itertuples():
            md_lines.append(f"- **{r.application_id}**: {r.suggestions or 'none'}")
    else:
        md_lines.append("> No applications were evaluated for this job.\n")

    md_path = os.path.join(report_dir, f"{run.job_id}_top.md")
    Path(md_path).write_text("\n".join(md_lines), encoding="utf-8")
    return csv_path, md_path
