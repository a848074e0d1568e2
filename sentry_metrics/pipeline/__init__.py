"""Linear fetch, compute and report pipeline.

This package provides:
- Report configuration (TOML)
- A rich progress display for the fetch loops
- The runner that fetches projects, issues and events, computes MTTR and
  MTBF, and writes the spreadsheet report

Every error aborts the run; nothing is written unless all steps succeed.
"""
