"""Tests for ContentParser."""

import logging

import pytest

from waivern_message_extractor import (
    ContentParser,
    ExtractorConfigError,
    MessageExtractorConfig,
    SkippedCall,
    Token,
    TokenLike,
)

PHP_SIMPLE_CALL = """<?php
echo $this->translate("hello");
"""

PHP_CONCATENATED_CALL = """<?php
echo $this->translate("hi" . "there", [], "app");
"""

PHP_VARIABLE_ID = """<?php
$id = 'greeting';
echo $this->translate($id);
"""

PHP_UNBALANCED_BRACKETS = """<?php
echo $this->translate("x", [1, 2);
"""

PHP_NESTED_CALLS = """<?php
echo $this->translate("outer", [$this->translate("inner")]);
"""

PHP_MIXED_VIEW = """<?php
/** @var $this View */
$title = $this->translate('Dashboard', [], 'menu');
$intro = $this->translate(
    'Welcome back, {name}. You have {count} new ' . 'messages',
    [
        'name' => $user->name,
        'count' => count($messages),
    ]
);
$status = $this->translate('Status: ' . $status);
$footer = $translator->translate('Copyright {year}', ['year' => date('Y')]);
$menu = $this->translate('Dashboard', [], 'menu');
?>
<p><?= $this->translate('Logged in as {user}', ['user' => $user], 'auth') ?></p>
"""

PHP_STATIC_TRANSLATOR = """<?php
echo Yii::t('app', 'Not this one');
echo Translator::t("Hello");
echo Other::t("Ignored");
"""


class StubTokeniser:
    """Tokeniser returning canned tokens, used to avoid tree-sitter."""

    def __init__(self, tokens: list[TokenLike]) -> None:
        self.tokens = tokens
        self.sources: list[str] = []

    def tokenise(self, source: str) -> list[TokenLike]:
        self.sources.append(source)
        return self.tokens


@pytest.mark.integration
class TestContentParserExtractSource:
    """Test extraction from PHP source text."""

    def test_source_without_translator_calls(self) -> None:
        """Test that source without calls yields nothing."""
        parser = ContentParser()

        assert parser.extract_source("<?php echo 'hello'; translate('x');") == {}
        assert not parser.has_skipped_lines()
        assert parser.get_skipped_lines() == []

    def test_simple_call_uses_default_category(self) -> None:
        """Test translate("hello") under the default category."""
        parser = ContentParser(default_category="default")

        assert parser.extract_source(PHP_SIMPLE_CALL) == {"default": ["hello"]}
        assert not parser.has_skipped_lines()

    def test_default_category_is_empty_string(self) -> None:
        """Test that the default category defaults to an empty string."""
        assert ContentParser().extract_source(PHP_SIMPLE_CALL) == {"": ["hello"]}

    def test_concatenated_id_with_category(self) -> None:
        """Test translate("hi" . "there", [], "app")."""
        parser = ContentParser()

        assert parser.extract_source(PHP_CONCATENATED_CALL) == {"app": ["hithere"]}

    def test_variable_id_is_skipped_with_full_call_text(self) -> None:
        """Test translate($var) is reported with prefix and closing paren."""
        parser = ContentParser()

        assert parser.extract_source(PHP_VARIABLE_ID) == {}
        assert parser.has_skipped_lines()
        assert parser.get_skipped_lines() == [(3, "->translate($id)")]

    def test_unbalanced_brackets_are_skipped(self) -> None:
        """Test translate("x", [1, 2) produces one skipped entry."""
        parser = ContentParser()

        assert parser.extract_source(PHP_UNBALANCED_BRACKETS) == {}
        assert len(parser.get_skipped_lines()) == 1

    def test_nested_calls(self) -> None:
        """Test translate("outer", [translate("inner")])."""
        parser = ContentParser(default_category="app")

        assert parser.extract_source(PHP_NESTED_CALLS) == {"app": ["outer", "inner"]}

    def test_mixed_view(self) -> None:
        """Test a realistic template with several call shapes."""
        parser = ContentParser(default_category="app")

        messages = parser.extract_source(PHP_MIXED_VIEW)

        assert messages == {
            "menu": ["Dashboard", "Dashboard"],
            "app": [
                "Welcome back, {name}. You have {count} new messages",
                "Copyright {year}",
            ],
            "auth": ["Logged in as {user}"],
        }
        skipped = parser.get_skipped_lines()
        assert skipped == [
            SkippedCall(line=11, source="->translate('Status: ' . $status)")
        ]

    def test_custom_static_translator(self) -> None:
        """Test a static-call translator pattern."""
        parser = ContentParser(translator="Translator::t")

        assert parser.extract_source(PHP_STATIC_TRANSLATOR) == {"": ["Hello"]}

    def test_static_translator_ignores_other_classes(self) -> None:
        """Test that a class-qualified pattern does not match other classes."""
        parser = ContentParser(translator="Yii::t")

        messages = parser.extract_source(
            '<?php Logger::t("not-a-message"); Yii::t("real");'
        )

        assert messages == {"": ["real"]}

    def test_translator_with_receiver(self) -> None:
        """Test a pattern that names the receiver variable."""
        parser = ContentParser(translator="$this->translate")

        messages = parser.extract_source(
            '<?php $this->translate("a"); $x->translate("b");'
        )

        assert messages == {"": ["a"]}
        assert not parser.has_skipped_lines()

    @pytest.mark.parametrize(
        "source",
        [
            '<?php $t->translate("caf\\xC3\\xA9");',
            "<?php $t->translate('caf\\303\\251');",
        ],
        ids=["hex_escapes", "octal_escapes"],
    )
    def test_escaped_utf8_bytes_are_decoded(self, source: str) -> None:
        """Test that escaped UTF-8 byte sequences become one character."""
        assert ContentParser().extract_source(source) == {"": ["café"]}


class TestContentParserConfiguration:
    """Test parser configuration."""

    def test_constructor_arguments_override_config(self) -> None:
        """Test that explicit arguments take precedence over config."""
        config = MessageExtractorConfig(default_category="app", translator="->t")
        tokeniser = StubTokeniser(
            [
                Token("open_tag", "<?php", 1),
                Token("whitespace", " ", 1),
                Token("variable", "$_", 1),
                Token("operator", "->", 1),
                Token("name", "t", 1),
                "(",
                ")",
                ";",
            ]
        )

        parser = ContentParser(
            default_category="errors", config=config, tokeniser=tokeniser
        )

        assert parser.config.default_category == "errors"
        assert parser.config.translator == "->t"
        assert tokeniser.sources == ["<?php $_->t();"]

    def test_too_short_translator_is_rejected(self) -> None:
        """Test that a one-token translator is a configuration error."""
        tokeniser = StubTokeniser(
            [Token("open_tag", "<?php", 1), Token("whitespace", " ", 1)]
            + [Token("name", "t", 1), "(", ")", ";"]
        )

        with pytest.raises(ExtractorConfigError, match="at least 2 tokens"):
            ContentParser(translator="t", tokeniser=tokeniser)

    def test_blank_translator_is_rejected(self) -> None:
        """Test that a blank translator fails validation."""
        with pytest.raises(ExtractorConfigError, match="non-empty"):
            ContentParser(translator="   ")

    def test_set_default_category(self) -> None:
        """Test that the default category can be replaced later."""
        parser = ContentParser(tokeniser=_arrow_translate_tokeniser())
        tokens = _translate_call(Token("string", "'a'", 1))

        assert parser.extract(tokens) == {"": ["a"]}
        parser.set_default_category("app")
        assert parser.extract(tokens) == {"app": ["a"]}
        assert parser.config.default_category == "app"

    def test_set_default_category_is_validated(self) -> None:
        """Test that a replacement category goes through validation."""
        parser = ContentParser(tokeniser=_arrow_translate_tokeniser())

        with pytest.raises(ExtractorConfigError, match="default_category"):
            parser.set_default_category(123)  # type: ignore[arg-type]

        assert parser.config.default_category == ""


def _arrow_translate_tokeniser() -> StubTokeniser:
    return StubTokeniser(
        [
            Token("open_tag", "<?php", 1),
            Token("whitespace", " ", 1),
            Token("variable", "$_", 1),
            Token("operator", "->", 1),
            Token("name", "translate", 1),
            "(",
            ")",
            ";",
        ]
    )


def _translate_call(*arguments: TokenLike, line: int = 1) -> list[TokenLike]:
    return [
        Token("variable", "$this", line),
        Token("operator", "->", line),
        Token("name", "translate", line),
        "(",
        *arguments,
        ")",
        ";",
    ]


class TestContentParserExtract:
    """Test extraction from token streams."""

    @pytest.fixture
    def parser(self) -> ContentParser:
        """Provide a parser that does not need tree-sitter."""
        return ContentParser(
            default_category="app", tokeniser=_arrow_translate_tokeniser()
        )

    def test_pattern_is_compiled_from_tokeniser_output(
        self, parser: ContentParser
    ) -> None:
        """Test that open tag, receiver and trailing call are dropped."""
        assert parser.pattern.tokens == (
            Token("operator", "->", 1),
            Token("name", "translate", 1),
        )

    def test_extract_is_idempotent(self, parser: ContentParser) -> None:
        """Test that extracting the same tokens twice gives the same mapping."""
        tokens = [
            *_translate_call(Token("string", "'a'", 1)),
            *_translate_call(Token("variable", "$b", 2), line=2),
        ]

        first = parser.extract(tokens)
        second = parser.extract(tokens)

        assert first == second == {"app": ["a"]}
        assert parser.get_skipped_lines() == [(2, "->translate($b)")]

    def test_skipped_lines_reflect_latest_extraction_only(
        self, parser: ContentParser
    ) -> None:
        """Test that skipped calls do not accumulate across extractions."""
        parser.extract(_translate_call(Token("variable", "$b", 1)))
        assert parser.has_skipped_lines()

        parser.extract(_translate_call(Token("string", "'a'", 1)))

        assert not parser.has_skipped_lines()
        assert parser.get_skipped_lines() == []

    def test_extract_result_reports_counts(self, parser: ContentParser) -> None:
        """Test the full extraction result."""
        tokens = [
            *_translate_call(Token("string", "'a'", 1)),
            *_translate_call(
                Token("string", "'b'", 2),
                ",",
                "[",
                "]",
                ",",
                Token("string", "'menu'", 2),
                line=2,
            ),
            *_translate_call(Token("variable", "$c", 3), line=3),
        ]

        result = parser.extract_result(tokens)

        assert result.messages == {"app": ["a"], "menu": ["b"]}
        assert result.message_count == 2
        assert result.has_skipped
        assert result.skipped == [(3, "->translate($c)")]

    def test_get_skipped_lines_returns_a_copy(self, parser: ContentParser) -> None:
        """Test that callers cannot modify the parser's skipped list."""
        parser.extract(_translate_call(Token("variable", "$b", 1)))

        parser.get_skipped_lines().clear()

        assert parser.has_skipped_lines()

    def test_extract_source_uses_tokeniser(self) -> None:
        """Test that extract_source tokenises the content first."""
        tokeniser = _arrow_translate_tokeniser()
        parser = ContentParser(tokeniser=tokeniser)
        tokeniser.tokens = _translate_call(Token("string", "'a'", 1))

        assert parser.extract_source("<?php $this->translate('a');") == {"": ["a"]}
        assert tokeniser.sources[-1] == "<?php $this->translate('a');"

    def test_extraction_is_logged(
        self, parser: ContentParser, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that skipped calls and a summary are logged at debug level."""
        with caplog.at_level(logging.DEBUG, logger="waivern_message_extractor"):
            parser.extract(_translate_call(Token("variable", "$b", 4), line=4))

        assert "Skipping translator call at line 4" in caplog.text
        assert "skipped 1 calls" in caplog.text
