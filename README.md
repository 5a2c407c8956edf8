# jasmgen

`jasmgen` is the back half of a compiler for a small, statically typed,
C-like language. You give it an abstract syntax tree. It checks the tree for
semantic errors and then writes JVM assembly as Jasmin-style text.

## Modules

- `jasmgen.typesys` defines `BasicType` and `Type`, the language's scalar and
  array types. For example, `str(Type(BasicType.INT, [3]))` is `int[3]`.
- `jasmgen.nodes` holds the AST node classes:
  - literals
  - variables
  - unary, binary and postfix operators
  - calls, ranges and assignments
  - blocks, `if`, `while`, `for`, `foreach` and `return`
  - declarations
  - `print`, `println` and `read`
  - `Program`

  Every node has `accept(visitor)`. A `Visitor` dispatches each node to
  its `visit_<snake_case_name>` method.
- `jasmgen.symbols` provides `SymEntry` and `SymbolTable`. They handle nested
  scopes and JVM local-slot allocation. Slot numbering restarts in every
  function scope.
- `jasmgen.checker` provides `ExpressionChecker`, which type-checks
  expressions. It also provides `eval_const_expr`, which returns the value of
  a literal expression and `None` for any other expression.
- `jasmgen.analyzer` provides `SemanticAnalyzer`, which walks a whole
  `Program` and resolves symbols and types. `analyze()` raises
  `SemanticError`, carrying the collected messages in `errors`, if any errors
  were found. Otherwise it returns the list of warnings.
- `jasmgen.emitter` provides two classes:
  - `CodeEmitter` is an indenting line writer over a text stream.
  - `CodeGenContext` keeps the class name, label and local-slot counters, and
    a stack of loop labels.
- `jasmgen.codegen` provides `CodeGenVisitor`, which turns an analysed
  `Program` into assembly text.

## Usage

```python
import io

from jasmgen.analyzer import SemanticAnalyzer, SemanticError
from jasmgen.codegen import CodeGenVisitor
from jasmgen.emitter import CodeEmitter, CodeGenContext
from jasmgen.nodes import Block, FuncDecl, IntLit, Println, Program, VarDecl
from jasmgen.symbols import SymbolTable
from jasmgen.typesys import BasicType, Type

program = Program(
    globals=[VarDecl(Type(BasicType.INT), "answer", IntLit(42))],
    stmts=[
        FuncDecl(
            Type(BasicType.VOID),
            "main",
            [],
            Block([Println(IntLit(1))]),
        )
    ],
)

symtab = SymbolTable()
try:
    warnings = SemanticAnalyzer(symtab).analyze(program)
except SemanticError as exc:
    print(exc)
    raise

out = io.StringIO()
CodeGenVisitor(CodeEmitter(out), CodeGenContext("example"), symtab).generate(program)
print(out.getvalue())
```

The output is a `class example` body containing:

- a `field static int answer = 42` declaration;
- a `method public static void main(java.lang.String[])`, which calls
  `java.io.PrintStream.println(int)` and ends with `return`.

## Notes

- Every message has the form `line N: message`.
- A warning, not an error, is issued when a non-void function might not
  return on every path.
- Code generation targets `int`, `boolean` and `java.lang.String`. Any other
  type is written as `int` in signatures and field descriptors.
- Global `int`, `boolean` and `string` variables become static fields.
  - Literal initialisers are written inline.
  - Other initialisers are assigned in a generated `<clinit>` method.

## What it does not do

- There is no lexer or parser. Trees must be built from the classes in
  `jasmgen.nodes`.
- There is no command-line program.
- It does not assemble the emitted text into `.class` files.
- `read` statements and array element access produce no code.

## Development

```
pip install -e .[test]
pytest
```