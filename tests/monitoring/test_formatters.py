from diffwatch.monitoring import formatters as fmt


def test_format_header_and_suppressed():
    """Teste para cabeçalho de data e linha do modo silencioso."""
    assert fmt.format_header("TS") == "TS\n\n"
    assert fmt.format_suppressed("TS") == "TS\r"


def test_prefix_lines_only_splits_on_newline():
    """Prefixo em cada linha; \\r e outros controles passam intactos."""
    assert fmt.prefix_lines("a\nb\n", "<EL>") == "<EL>a\n<EL>b\n"
    assert fmt.prefix_lines("a\r\nb", "<EL>") == "<EL>a\r\n<EL>b"
    assert fmt.prefix_lines("", "<EL>") == ""
    assert fmt.prefix_lines("a\n", "") == "a\n"


def test_count_lines():
    """Teste para contagem de linhas com e sem newline final."""
    assert fmt.count_lines("") == 0
    assert fmt.count_lines("a\nb\n") == 2
    assert fmt.count_lines("a\nb") == 2


def test_compose_full_render_variants():
    """Cabeçalho, newline final, prefixo e home na ordem esperada."""
    assert fmt.compose_full_render("d\n", "TS") == "TS\n\nd\n\n"
    assert fmt.compose_full_render("d\n", "TS", show_date=False, trailing_newline=False) == "d\n"
    out = fmt.compose_full_render("d\n", "TS", trailing_newline=False, erase_line="<EL>", home="<HO>")
    assert out == "<HO><EL>TS\n<EL>\n<EL>d\n"
