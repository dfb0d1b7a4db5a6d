#!/usr/bin/env python -Es
"""Batch adapter trimming and de novo assembly of paired-end reads.

Usage:
  yap_runner.py new [-d raw_reads] [-l 3] [-s _] [--csv]
  yap_runner.py qc -i yap-qc_input.conf [--id] [--rename] [--dry] [-o clean_reads] [--opts="..."]
  yap_runner.py assembly auto [-d clean_reads] [-s trimmed] [-t threads] [--dry]
  yap_runner.py assembly conf -i assembly.conf [-t threads] [--dry]
  yap_runner.py assembly clean -d assemblies
  yap_runner.py check
"""
import sys

from yap.pipeline.main import parse_cl_args, run_main

def main(in_args=None):
    args = parse_cl_args(sys.argv[1:] if in_args is None else in_args)
    return run_main(args)

if __name__ == "__main__":
    sys.exit(main())
