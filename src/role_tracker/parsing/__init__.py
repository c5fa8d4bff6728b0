"""Pure text parsers shared by every extractor."""

from role_tracker.parsing.company import (
    YCCompanyLabel,
    extract_company_name,
    parse_yc_company_label,
)
from role_tracker.parsing.dates import parse_iso_date, parse_posting_date
from role_tracker.parsing.roles import (
    extract_role_level,
    infer_work_mode,
    parse_company_size,
    parse_funding_stage,
)
from role_tracker.parsing.salary import NOT_SPECIFIED, SalaryInfo, mentions_equity, parse_salary
from role_tracker.parsing.text import clean_title, normalize_text, truncate

__all__ = [
    "NOT_SPECIFIED",
    "SalaryInfo",
    "YCCompanyLabel",
    "clean_title",
    "extract_company_name",
    "extract_role_level",
    "infer_work_mode",
    "mentions_equity",
    "normalize_text",
    "parse_company_size",
    "parse_funding_stage",
    "parse_iso_date",
    "parse_posting_date",
    "parse_salary",
    "parse_yc_company_label",
    "truncate",
]
