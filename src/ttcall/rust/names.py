"""
Callee names of the Rust path/type grammar.

Rules refer to each other by name; the registry resolves them when an
invocation is built.
"""

# Paths
PARSE_PATH = "parse_path"
AFTER_IDENT = "private_parse_possibly_empty_path_after_ident"
AFTER_CLOSE_ANGLE = "private_parse_possibly_empty_path_after_close_angle"
IN_ANGLE_BRACKETS = "private_parse_in_angle_brackets"
GENERIC_PARAM = "private_parse_generic_param"
VALIDATE_FN_ARGS = "private_validate_fn_path_args"
AFTER_FN_ARGS = "private_parse_path_after_fn_args"

# Types
PARSE_TYPE = "parse_type"
TYPE_WITH_PLUS = "private_parse_type_with_plus"
BOUND = "private_parse_bound"
VALIDATE_TYPE_LIST = "private_validate_type_list"
BRACKETED_TYPE = "private_parse_bracketed_type"
FN_POINTER = "private_parse_fn_pointer"
QUALIFIED_PATH = "private_parse_qualified_path"
