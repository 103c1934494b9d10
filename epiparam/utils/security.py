import ast

_FORBIDDEN_NODES: tuple[type[ast.AST], ...] = (
    ast.Attribute,
    ast.Subscript,
    ast.Lambda,
    ast.ListComp,
    ast.SetComp,
    ast.DictComp,
    ast.GeneratorExp,
    ast.NamedExpr,
    ast.Starred,
    ast.Await,
    ast.Yield,
    ast.YieldFrom,
    ast.Dict,
    ast.Set,
)


def _parse(expression: str) -> ast.Expression:
    try:
        return ast.parse(expression.strip(), mode="eval")
    except SyntaxError as e:
        raise ValueError(f"Invalid syntax: {e.msg}") from e


def validate_expression_security(expression: str) -> None:
    """
    Reject expressions that reach beyond arithmetic on named values.

    Attribute access, subscripts, comprehensions, lambdas and dunder names are
    refused. Calls are only allowed on plain names.

    Parameters
    ----------
    expression : str
        The expression to check.

    Raises
    ------
    ValueError
        If the expression does not parse or uses a forbidden construct.
    """
    tree = _parse(expression)
    for node in ast.walk(tree):
        if isinstance(node, _FORBIDDEN_NODES):
            raise ValueError(f"Forbidden construct '{type(node).__name__}'")
        if isinstance(node, ast.Name) and node.id.startswith("__"):
            raise ValueError(f"Forbidden name '{node.id}'")
        if isinstance(node, ast.Call):
            if not isinstance(node.func, ast.Name):
                raise ValueError("Only calls to named functions are allowed")
            if node.keywords:
                raise ValueError("Keyword arguments are not allowed in calls")


def get_expression_variables(expression: str) -> list[str]:
    """
    Return the variable names an expression reads, in order of appearance.

    Names used only as the function of a call are not variables.
    """
    tree = _parse(expression)
    functions = {
        node.func.id
        for node in ast.walk(tree)
        if isinstance(node, ast.Call) and isinstance(node.func, ast.Name)
    }
    variables: list[str] = []
    for node in ast.walk(tree):
        if (
            isinstance(node, ast.Name)
            and node.id not in functions
            and node.id not in variables
        ):
            variables.append(node.id)
    return variables
