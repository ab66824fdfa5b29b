import pytest

from sloth.types import LispError, Nil, Symbol, lisp_list, make_list
from sloth.types.errors import (
    ARITY_ERROR,
    MALFORMED_FORM,
    NOT_APPLICABLE,
    TYPE_ERROR,
    UNBOUND_SYMBOL,
)
from sloth.reader.parser import read_all

TRUE, FALSE = Symbol("true"), Symbol("false")


def read1(source):
    return read_all(source)[0]


def raises_kind(interp, code, kind):
    with pytest.raises(LispError) as exc:
        interp.eval(code)
    assert exc.value.kind == kind
    return exc.value


# -----------------------------------------------------
# Atoms and quoting
# -----------------------------------------------------

def test_self_evaluating_atoms(bare):
    assert bare.eval("42") == 42
    assert bare.eval("2.5") == 2.5
    assert bare.eval('"text"') == "text"
    assert bare.eval("()") is Nil


def test_constants(bare):
    assert bare.eval("true") == TRUE
    assert bare.eval("false") == FALSE
    assert bare.eval("nil") is Nil


def test_quote(bare):
    assert bare.eval("'x") == Symbol("x")
    assert bare.eval("'(1 (2 three))") == read1("(1 (2 three))")
    assert bare.eval("(quote (a . b))") == read1("(a . b)")


def test_quote_arity(bare):
    raises_kind(bare, "(quote)", MALFORMED_FORM)
    raises_kind(bare, "(quote a b)", MALFORMED_FORM)


def test_unbound_symbol(bare):
    err = raises_kind(bare, "nowhere", UNBOUND_SYMBOL)
    assert err.source == Symbol("nowhere")


def test_unknown_operator_is_unbound(bare):
    raises_kind(bare, "(no-such-fn 1 2)", UNBOUND_SYMBOL)


def test_not_applicable(bare):
    raises_kind(bare, "(1 2 3)", NOT_APPLICABLE)
    raises_kind(bare, '("f" 1)', NOT_APPLICABLE)


def test_improper_form_is_malformed(bare):
    raises_kind(bare, "(+ 1 . 2)", MALFORMED_FORM)


# -----------------------------------------------------
# Quasiquote
# -----------------------------------------------------

def test_quasiquote(bare):
    bare.eval("(define x 5)")
    bare.eval("(define xs '(1 2))")
    assert bare.eval("`(a ,x)") == read1("(a 5)")
    assert bare.eval("`(a ,@xs b)") == read1("(a 1 2 b)")
    assert bare.eval("`(,@xs)") == read1("(1 2)")
    assert bare.eval("`(0 ,@'() 1)") == read1("(0 1)")
    assert bare.eval("`x") == Symbol("x")


def test_quasiquote_dotted_tail(bare):
    bare.eval("(define x '(2 3))")
    assert bare.eval("`(1 . ,x)") == read1("(1 2 3)")
    assert bare.eval("`(1 . 2)") == make_list([1], 2)


def test_nested_quasiquote_keeps_inner_unquote(bare):
    bare.eval("(define x 5)")
    assert bare.eval("`(a `(b ,(c ,x)))") == read1("(a (quasiquote (b (unquote (c 5)))))")


def test_unquote_outside_quasiquote(bare):
    raises_kind(bare, ",x", MALFORMED_FORM)
    raises_kind(bare, "(unquote-splicing x)", MALFORMED_FORM)


def test_splicing_a_non_list(bare):
    raises_kind(bare, "`(a ,@5)", TYPE_ERROR)


# -----------------------------------------------------
# if, and, or: truthiness
# -----------------------------------------------------

@pytest.mark.parametrize("falsey", ["false", "0", "'()", '""'])
def test_if_falsey(bare, falsey):
    assert bare.eval(f"(if {falsey} 'yes 'no)") == Symbol("no")


@pytest.mark.parametrize("truthy", ["true", "1", "-1", "0.0", "'(0)", '" "', "'sym", "car"])
def test_if_truthy(bare, truthy):
    assert bare.eval(f"(if {truthy} 'yes 'no)") == Symbol("yes")


def test_if_without_else(bare):
    assert bare.eval("(if false 1)") is Nil
    assert bare.eval("(if true 1)") == 1


def test_if_arity(bare):
    raises_kind(bare, "(if true)", MALFORMED_FORM)
    raises_kind(bare, "(if 1 2 3 4)", MALFORMED_FORM)


def test_if_evaluates_one_branch(bare):
    assert bare.eval("(if true 1 (car '()))") == 1


def test_and_or_return_deciding_value(bare):
    assert bare.eval("(and)") == TRUE
    assert bare.eval("(or)") == FALSE
    assert bare.eval("(and 1 2 3)") == 3
    assert bare.eval("(and 1 0 3)") == 0
    assert bare.eval("(or 0 \"\" 7 8)") == 7
    assert bare.eval("(or 0 '())") is Nil


def test_and_or_short_circuit(bare):
    assert bare.eval("(and false (car '()))") == FALSE
    assert bare.eval("(or 1 (car '()))") == 1


def test_not(bare):
    assert bare.eval("(not 0)") == TRUE
    assert bare.eval("(not '())") == TRUE
    assert bare.eval("(not 'false)") == TRUE
    assert bare.eval("(not 'x)") == FALSE


# -----------------------------------------------------
# define, set!, begin, let
# -----------------------------------------------------

def test_define_returns_symbol(bare):
    assert bare.eval("(define x 10)") == Symbol("x")
    assert bare.eval("x") == 10
    assert bare.eval("(define (f) 1)") == Symbol("f")


def test_define_malformed(bare):
    raises_kind(bare, "(define)", MALFORMED_FORM)
    raises_kind(bare, "(define 5 1)", MALFORMED_FORM)
    raises_kind(bare, "(define x 1 2)", MALFORMED_FORM)


def test_define_inside_body_is_local(bare):
    bare.eval("(define (f) (define y 3) y)")
    assert bare.eval("(f)") == 3
    assert bare.eval("(bound? 'y)") == FALSE


def test_set_returns_old_value(bare):
    bare.eval("(define x 1)")
    assert bare.eval("(set! x 2)") == 1
    assert bare.eval("x") == 2


def test_set_unbound(bare):
    raises_kind(bare, "(set! never-defined 1)", UNBOUND_SYMBOL)


def test_set_through_closure(bare):
    bare.eval("""
    (define (make-counter)
      (let ((n 0))
        (lambda () (set! n (+ n 1)) n)))
    (define c (make-counter))
    """)
    assert bare.eval("(c)") == 1
    assert bare.eval("(c)") == 2
    assert bare.eval("((make-counter))") == 1


def test_begin(bare):
    assert bare.eval("(begin)") is Nil
    assert bare.eval("(begin 1 2 3)") == 3


def test_let_binds_in_enclosing_scope(bare):
    bare.eval("(define x 1)")
    assert bare.eval("(let ((x 2) (y x)) (list x y))") == read1("(2 1)")
    assert bare.eval("x") == 1


def test_let_empty_body(bare):
    assert bare.eval("(let ((x 1)))") is Nil
    assert bare.eval("(let () 5)") == 5


@pytest.mark.parametrize("code", ["(let)", "(let (x) x)", "(let ((x)) x)", "(let ((1 2)) 1)", "(let 5 1)"])
def test_let_malformed(bare, code):
    raises_kind(bare, code, MALFORMED_FORM)


# -----------------------------------------------------
# lambda and case-lambda
# -----------------------------------------------------

def test_lambda_application(bare):
    assert bare.eval("((lambda (a b) (+ a b)) 1 2)") == 3
    assert bare.eval("((lambda args args) 1 2 3)") == read1("(1 2 3)")
    assert bare.eval("((lambda (a . rest) rest) 1 2 3)") == read1("(2 3)")
    assert bare.eval("((lambda (a . rest) rest) 1)") is Nil
    assert bare.eval("((lambda ()))") is Nil


def test_lambda_docstring(bare):
    bare.eval('(define (f) "documented" 1)')
    assert bare.eval("(f)") == 1
    assert bare.eval("f").doc == "documented"
    # A lone string is the body, not a docstring
    bare.eval('(define (g) "value")')
    assert bare.eval("(g)") == "value"
    assert bare.eval("g").doc is None


def test_closure_captures_environment(bare):
    bare.eval("(define (adder n) (lambda (x) (+ x n)))")
    bare.eval("(define add5 (adder 5))")
    assert bare.eval("(add5 10)") == 15


def test_arity_error(bare):
    bare.eval("(define (f a b) a)")
    raises_kind(bare, "(f 1)", ARITY_ERROR)
    raises_kind(bare, "(f 1 2 3)", ARITY_ERROR)
    raises_kind(bare, "((lambda (a . rest) a))", ARITY_ERROR)


def test_malformed_params(bare):
    raises_kind(bare, "(lambda (1) 1)", MALFORMED_FORM)
    raises_kind(bare, "(lambda)", MALFORMED_FORM)


def test_case_lambda_dispatch(bare):
    bare.eval("""
    (define f
      (case-lambda
        ((x) (list 'one x))
        ((x y) (list 'two x y))
        ((x . rest) (list 'many x rest))))
    """)
    assert bare.eval("(f 1)") == read1("(one 1)")
    assert bare.eval("(f 1 2)") == read1("(two 1 2)")
    assert bare.eval("(f 1 2 3)") == read1("(many 1 (2 3))")
    raises_kind(bare, "(f)", ARITY_ERROR)


def test_case_lambda_declaration_order(bare):
    bare.eval("(define g (case-lambda (args 'variadic) ((x) 'one)))")
    assert bare.eval("(g 1)") == Symbol("variadic")


def test_case_lambda_named_and_documented(bare):
    bare.eval('(define h (case-lambda "doc" ((x) x)))')
    h = bare.eval("h")
    assert h.name == "h"
    assert h.doc == "doc"


def test_binding_an_existing_procedure_keeps_its_name(bare):
    bare.eval("""
    (define (make) (lambda (x) x))
    (define anon (make))
    (define alias anon)
    (define named (lambda (x) x))
    (define other named)
    """)
    assert bare.eval("(let ((g anon)) (g 1))") == 1
    assert bare.eval("anon").name is None
    assert bare.eval("alias").name is None
    assert bare.eval("other").name == "named"
    assert bare.eval("((lambda () (let ((k (lambda (y) y))) k)))").name is None


def test_case_lambda_malformed(bare):
    raises_kind(bare, "(case-lambda)", MALFORMED_FORM)
    raises_kind(bare, "(case-lambda 5)", MALFORMED_FORM)


# -----------------------------------------------------
# Builtins through the evaluator
# -----------------------------------------------------

def test_arithmetic(bare):
    assert bare.eval("(+)") == 0
    assert bare.eval("(+ 1 2 3)") == 6
    assert bare.eval("(- 5)") == -5
    assert bare.eval("(- 10 1 2)") == 7
    assert bare.eval("(* 2 3 4)") == 24
    assert bare.eval("(/ 12 3)") == 4
    assert bare.eval("(/ 1 2)") == 0.5
    assert bare.eval("(mod -7 3)") == 2
    assert bare.eval("(< 1 2 3)") == TRUE
    assert bare.eval("(< 1 3 2)") == FALSE
    assert bare.eval("(= 2 2.0)") == TRUE


def test_arithmetic_type_error(bare):
    raises_kind(bare, "(+ 1 'a)", TYPE_ERROR)
    raises_kind(bare, '(< 1 "2")', TYPE_ERROR)


def test_eq_and_equal(bare):
    assert bare.eval("(eq? 'a 'a)") == TRUE
    assert bare.eval("(eq? 1 1)") == TRUE
    assert bare.eval("(eq? '(1) '(1))") == FALSE
    assert bare.eval("(equal? '(1 (2)) '(1 (2)))") == TRUE
    assert bare.eval("(equal? '(1) '(2))") == FALSE
    assert bare.eval("(let ((x '(1))) (eq? x x))") == TRUE


def test_list_primitives(bare):
    assert bare.eval("(cons 1 '(2))") == read1("(1 2)")
    assert bare.eval("(cons 1 2)") == make_list([1], 2)
    assert bare.eval("(car '(1 2))") == 1
    assert bare.eval("(cdr '(1 2))") == lisp_list(2)
    assert bare.eval("(list)") is Nil
    assert bare.eval("(cons? '(1))") == TRUE
    assert bare.eval("(cons? '())") == FALSE
    assert bare.eval("(null? '())") == TRUE
    assert bare.eval("(list? '(1 . 2))") == FALSE


def test_car_of_non_pair(bare):
    raises_kind(bare, "(car '())", TYPE_ERROR)
    raises_kind(bare, "(cdr 5)", TYPE_ERROR)


def test_builtin_arity(bare):
    raises_kind(bare, "(cons 1)", ARITY_ERROR)


def test_apply(bare):
    assert bare.eval("(apply + '(1 2 3))") == 6
    assert bare.eval("(apply (lambda (a b) (- a b)) (list 5 3))") == 2
    raises_kind(bare, "(apply + 5)", TYPE_ERROR)
    raises_kind(bare, "(apply 5 '())", NOT_APPLICABLE)


def test_eval_uses_global_environment(bare):
    assert bare.eval("(eval '(+ 1 2))") == 3
    bare.eval("(define x 'global)")
    assert bare.eval("(let ((x 'local)) (eval 'x))") == Symbol("global")
    bare.eval("(let ((y 1)) (eval '(define from-eval 7)))")
    assert bare.eval("from-eval") == 7


def test_eval_result_used_as_argument(bare):
    assert bare.eval("(+ 1 (eval '(* 2 3)))") == 7


def test_strings_and_symbols(bare):
    assert bare.eval('(string-append "a" "b" "c")') == "abc"
    assert bare.eval("(symbol->string 'abc)") == "abc"
    assert bare.eval('(string->symbol "abc")') == Symbol("abc")
    assert bare.eval("(repr '(a \"b\"))") == '(a "b")'


def test_predicates(bare):
    assert bare.eval("(procedure? car)") == TRUE
    assert bare.eval("(procedure? (lambda () 1))") == TRUE
    assert bare.eval("(procedure? 'car)") == FALSE
    assert bare.eval("(symbol? 'a)") == TRUE
    assert bare.eval('(string? "a")') == TRUE
    assert bare.eval("(number? 1.5)") == TRUE
    assert bare.eval("(char? #\\a)") == TRUE
    assert bare.eval("(bound? 'car)") == TRUE
    assert bare.eval("(bound? 'nope)") == FALSE


def test_print_and_println(bare, capsys):
    bare.eval('(print "a" 1 #\\b)')
    bare.eval('(println "c" (list "d"))')
    bare.eval("(println)")
    assert capsys.readouterr().out == "a1bc(d)\n\n"


def test_read_from_string_port(bare):
    bare.eval('(define port (open-input-string "(1 2) foo"))')
    assert bare.eval("(read port)") == read1("(1 2)")
    assert bare.eval("(read port)") == Symbol("foo")
    err = bare.eval("(catch-error (read port))")
    assert err.kind == Symbol("eof")


# -----------------------------------------------------
# Tail calls
# -----------------------------------------------------

def test_deep_tail_recursion(bare):
    bare.eval("""
    (define (count-down n)
      (if (= n 0) 'done (count-down (- n 1))))
    """)
    assert bare.eval("(count-down 100000)") == Symbol("done")


def test_tail_calls_through_let_begin_and_or(bare):
    bare.eval("""
    (define (loop n acc)
      (let ((m (- n 1)))
        (begin
          (and true
               (or false
                   (if (< m 0) acc (loop m (+ acc 1))))))))
    """)
    assert bare.eval("(loop 100000 0)") == 100000


def test_mutual_recursion_in_tail_position(bare):
    bare.eval("""
    (define (my-even? n) (if (= n 0) true (my-odd? (- n 1))))
    (define (my-odd? n) (if (= n 0) false (my-even? (- n 1))))
    """)
    assert bare.eval("(my-even? 100001)") == FALSE


def test_case_lambda_tail_recursion(bare):
    bare.eval("""
    (define sum-to
      (case-lambda
        ((n) (sum-to n 0))
        ((n acc) (if (= n 0) acc (sum-to (- n 1) (+ acc n))))))
    """)
    assert bare.eval("(sum-to 100000)") == 5000050000


def test_tail_apply(bare):
    bare.eval("(define (spin n) (if (= n 0) 'ok (apply spin (list (- n 1)))))")
    assert bare.eval("(spin 50000)") == Symbol("ok")
