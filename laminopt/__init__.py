"""Interior-point laminate constraints, response approximations and CalculiX response extraction."""

__version__ = "0.1.0"

__all__ = [
    "sdp_parameter",
    "scalar_sdp",
    "sdp",
    "miki",
    "laminate_layout",
    "lp_feasible",
    "laminate_section",
    "approx_function",
    "response_schema",
    "quadratic_approx",
    "calculix_extraction",
    "benchmark_schema",
]