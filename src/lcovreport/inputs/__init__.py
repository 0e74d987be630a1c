from lcovreport.inputs.lcov import parse_lcov, read_lcov

__all__ = ["parse_lcov", "read_lcov"]
