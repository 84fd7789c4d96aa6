"""Unit tests for steering patterns module.

Tests the glob dialect used by auto-trigger patterns.
"""

import pytest

from steering.errors import ConfigurationError, UnknownPatternSyntaxError
from steering.patterns import PathPattern, compile_pattern, normalize_path, translate


class TestNormalizePath:
    """Tests for normalize_path helper."""

    def test_backslashes_become_slashes(self):
        assert normalize_path("lib\\features\\auth_cubit.dart") == "lib/features/auth_cubit.dart"

    def test_leading_dot_slash_removed(self):
        assert normalize_path("./lib/main.dart") == "lib/main.dart"
        assert normalize_path("././lib/main.dart") == "lib/main.dart"

    def test_plain_path_unchanged(self):
        assert normalize_path("lib/main.dart") == "lib/main.dart"


class TestBasenamePatterns:
    """Patterns without '/' match the final path segment."""

    def test_substring_wildcards_match_anywhere_in_filename(self):
        pattern = PathPattern("*cubit*.dart")

        assert pattern.matches("lib/features/auth/auth_cubit.dart")
        assert pattern.matches("cubit.dart")
        assert pattern.matches("lib/cubits/counter_cubit_test.dart")

    def test_extension_must_match(self):
        pattern = PathPattern("*cubit*.dart")

        assert not pattern.matches("lib/auth_cubit.py")
        assert not pattern.matches("lib/auth_cubit.dart.bak")

    def test_directory_names_do_not_count(self):
        """Only the filename is considered, not parent directories."""
        pattern = PathPattern("*cubit*.dart")

        assert not pattern.matches("lib/cubit/auth.dart")

    def test_exact_filename(self):
        pattern = PathPattern("analysis_options.yaml")

        assert pattern.matches("analysis_options.yaml")
        assert pattern.matches("packages/core/analysis_options.yaml")
        assert not pattern.matches("analysis_options.yaml.orig")

    def test_question_mark_matches_one_character(self):
        pattern = PathPattern("app_??.arb")

        assert pattern.matches("lib/l10n/app_en.arb")
        assert not pattern.matches("lib/l10n/app_enu.arb")

    def test_matching_is_case_sensitive(self):
        pattern = PathPattern("*cubit*.dart")

        assert not pattern.matches("lib/AuthCubit.dart")

    def test_windows_paths_are_normalised(self):
        assert PathPattern("*bloc*.dart").matches("lib\\auth\\auth_bloc.dart")


class TestPathPatterns:
    """Patterns containing '/' match the whole relative path."""

    def test_star_stays_within_segment(self):
        pattern = PathPattern("lib/*.dart")

        assert pattern.matches("lib/main.dart")
        assert not pattern.matches("lib/features/auth.dart")

    def test_double_star_crosses_segments(self):
        pattern = PathPattern("integration_test/**/*.dart")

        assert pattern.matches("integration_test/app_test.dart")
        assert pattern.matches("integration_test/flows/login/login_test.dart")
        assert not pattern.matches("test/app_test.dart")

    def test_leading_double_star(self):
        pattern = PathPattern("**/domain/*.dart")

        assert pattern.matches("domain/user.dart")
        assert pattern.matches("lib/features/auth/domain/user.dart")
        assert not pattern.matches("lib/features/auth/data/user.dart")

    def test_trailing_double_star(self):
        pattern = PathPattern("lib/l10n/**")

        assert pattern.matches("lib/l10n/app_en.arb")
        assert pattern.matches("lib/l10n/generated/app_localizations.dart")
        assert not pattern.matches("lib/main.dart")

    def test_anchored_at_start(self):
        assert not PathPattern("lib/*.dart").matches("packages/app/lib/main.dart")


class TestCharacterClasses:
    """Tests for [...] classes."""

    def test_positive_class(self):
        pattern = PathPattern("app_[ef]*.arb")

        assert pattern.matches("app_en.arb")
        assert pattern.matches("app_fr.arb")
        assert not pattern.matches("app_de.arb")

    def test_negated_class(self):
        pattern = PathPattern("app_[!e]*.arb")

        assert pattern.matches("app_de.arb")
        assert not pattern.matches("app_en.arb")

    def test_caret_negation(self):
        assert PathPattern("app_[^e]*.arb").matches("app_de.arb")

    def test_range(self):
        pattern = PathPattern("v[0-9].dart")

        assert pattern.matches("v1.dart")
        assert not pattern.matches("va.dart")

    def test_literal_bracket_member(self):
        assert PathPattern("[]]x.dart").matches("]x.dart")

    def test_negated_literal_bracket_member(self):
        pattern = PathPattern("[!]]x.dart")

        assert pattern.matches("ax.dart")
        assert not pattern.matches("]x.dart")
        assert pattern.matches("lib/features/ax.dart")


class TestPatternSyntaxErrors:
    """Invalid patterns fail at compile time."""

    @pytest.mark.parametrize(
        "pattern, reason",
        [
            ("", "empty pattern"),
            ("   ", "empty pattern"),
            ("/lib/*.dart", "relative"),
            ("lib/", "end with"),
            ("lib//main.dart", "empty path segment"),
            ("lib/a**.dart", "whole path segment"),
            ("*[abc.dart", "unterminated"),
        ],
    )
    def test_invalid_patterns_raise(self, pattern, reason):
        with pytest.raises(UnknownPatternSyntaxError, match=reason):
            translate(pattern)

    def test_invalid_range_raises(self):
        with pytest.raises(UnknownPatternSyntaxError):
            PathPattern("[z-a].dart")

    def test_error_is_configuration_error(self):
        """UnknownPatternSyntaxError is a kind of ConfigurationError."""
        with pytest.raises(ConfigurationError):
            PathPattern("lib/")

    def test_error_carries_pattern(self):
        with pytest.raises(UnknownPatternSyntaxError) as exc_info:
            PathPattern("*[abc.dart")

        assert exc_info.value.pattern == "*[abc.dart"
        assert exc_info.value.rule == "pattern-syntax"


class TestCompilePattern:
    """Tests for the compile cache."""

    def test_returns_equal_patterns(self):
        assert compile_pattern("*bloc*.dart") == PathPattern("*bloc*.dart")

    def test_cached_instance_reused(self):
        assert compile_pattern("*theme*.dart") is compile_pattern("*theme*.dart")
