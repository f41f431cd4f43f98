"""Token codes shared by the SQL front end and the storage core."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional


class SqlToken(IntEnum):
    """Every token code, numbered in one continuous sequence."""

    # entity kinds
    IDENTIFIER = 0
    IDENTIFIER_IDENTIFIER = 1
    QUERY_TYPE = 2
    AGG_FN = 3
    KEYWORD = 4
    OPERATOR = 5
    DTYPE = 6
    ENTITY_MAX = 7

    # query types
    SELECT_Q = 8
    UPDATE_Q = 9
    CREATE_Q = 10
    DELETE_Q = 11
    INSERT_Q = 12
    DROP_TABLE_Q = 13
    UNSUPPORTED_Q = 14

    # aggregate functions
    SUM = 15
    MIN = 16
    MAX = 17
    COUNT = 18
    AVG = 19
    AGG_FN_NONE = 20

    # keywords
    FROM = 21
    WHERE = 22
    GROUP_BY = 23
    HAVING = 24
    ORDER_BY = 25
    LIMIT = 26
    PRIMARY_KEY = 27
    NOT_NULL = 28
    SELECT = 29
    AS = 30
    KEYWORD_MAX = 31

    # operators
    LESS_THAN = 32
    LESS_THAN_EQ = 33
    GREATER_THAN = 34
    EQ = 35
    NOT_EQ = 36
    AND = 37
    OR = 38
    GREATER_THAN_EQ = 39
    NOT = 40
    IN = 41
    LIKE = 42
    BETWEEN = 43
    OP_MAX = 44

    # data types
    DTYPE_FIRST = 45
    STRING = 46
    INT = 47
    DOUBLE = 48
    BOOL = 49
    DTYPE_MAX = 50

    # data type attributes
    DTYPE_LEN = 51
    DTYPE_ATTR_MAX = 52

    # literal values
    INTEGER_VALUE = 53
    STRING_VALUE = 54
    DOUBLE_VALUE = 55
    IDNT_TYPE_MAX = 56

    # math functions
    MATH_MAX = 57
    MATH_MIN = 58
    MATH_PLUS = 59
    MATH_MINUS = 60
    MATH_MUL = 61
    MATH_DIV = 62
    MATH_SQRT = 63
    MATH_SQR = 64
    MATH_SIN = 65
    MATH_COS = 66
    MATH_POW = 67
    MATH_MOD = 68
    MATH_FNS_MAX = 69

    # ordering
    ORDERBY_ASC = 70
    ORDERBY_DSC = 71
    ORDER_BY_MAX = 72

    # punctuation
    COMMA = 73
    BRACKET_START = 74
    BRACKET_END = 75
    QUOTATION_MARK = 76


_DTYPE_NAMES = {
    SqlToken.STRING: "SQL_STRING",
    SqlToken.INT: "SQL_INT",
    SqlToken.DOUBLE: "SQL_DOUBLE",
}

_DTYPE_SIZES = {
    SqlToken.STRING: 1,
    SqlToken.INT: 4,
    SqlToken.DOUBLE: 8,
}

_AGG_NAMES = {
    SqlToken.SUM: "sum",
    SqlToken.MIN: "min",
    SqlToken.MAX: "max",
    SqlToken.COUNT: "count",
    SqlToken.AVG: "avg",
}


def is_valid_dtype(dtype: int) -> bool:
    """True for the column types a table may declare."""
    return dtype in _DTYPE_NAMES


def dtype_str(dtype: int) -> Optional[str]:
    """Printable name of a column type, or None for anything else."""
    return _DTYPE_NAMES.get(dtype)


def dtype_size(dtype: int) -> int:
    """Storage size in bytes of one unit of a column type (0 if unknown)."""
    return _DTYPE_SIZES.get(dtype, 0)


def agg_fn_tostring(agg_fn: int) -> str:
    """Lower-case name of an aggregate function, or an empty string."""
    return _AGG_NAMES.get(agg_fn, "")