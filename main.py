#!/usr/bin/env python3
"""
Main script for running the formulation analysis workflow.
"""

# Workflow overview:
# 1) Load a formulation CSV (or generate a synthetic table) and validate it.
# 2) Fit ANOVA and regression models, run the t-tests and the confidence
#    interval for mean drug release.
# 3) Draw the scatter, histogram, box and control charts.
# 4) Export tables as CSV and charts as PNG under the output directory.

import logging
import sys

from formulr.workflow import main

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(log_path: str = "formulation_analysis.log") -> None:
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_path, mode="w"),
        ],
    )


if __name__ == "__main__":
    configure_logging()
    sys.exit(main())
