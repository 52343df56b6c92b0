"""
Unit tests for build log error classification.

Tests the default and strict pattern sets against real editor log excerpts,
extra patterns, and the details reported for each match.
"""

import pytest

from unitybuildrunner.classification import (
    DEFAULT_PATTERNS,
    STRICT_PATTERNS,
    ErrorClassifier,
    create_classifier,
)
from unitybuildrunner.validation import ValidationError

FAILURE_SAMPLES = [
    "-----CompilerOutput:-stdout--exitcode: 1--compilationhadfailure: True--outfile: Temp/Assembly-CSharp.dll",
    "DisplayProgressNotification: Build Failed",
    "Error building Player because scripts had compiler errors",
    "Assets/Externals/Plugins/Zenject/Source/Binding/Binders/NonLazyBinder.cs(10,16): error CS0246: "
    "The type or namespace name `IfNotBoundBinder' could not be found. Are you missing an assembly reference?",
    "Multiple Unity instances cannot open the same project.",
    "BatchMode: Unity has not been activated with a valid License. Could be a new activation or renewal...\n"
    "DisplayProgressbar: Unity license",
]

BENIGN_SAMPLES = [
    "Unloading 64 Unused Serialized files (Serialized files now loaded: 0)",
    "System memory in use before: 63.0 MB.",
    "DisplayProgressbar: Unity Package Manager",
]

MULTILINE_FAILURE = """2018-11-05T00:53:44.2566426Z DisplayProgressNotification: Build Failed
Error building Player because scripts had compiler errors
(Filename:  Line: -1)
Unloading 64 Unused Serialized files (Serialized files now loaded: 0)
System memory in use before: 63.0 MB.
System memory in use after: 63.4 MB.
"""

SHADER_LOG = [
    'Compiling shader "Shader Graphs/UrpFoo" pass "" (vp)',
    "    Full variant space:         2",
    "    starting compilation...",
    "    finished in 0.22 seconds. Local cache hits 0 (0.00s CPU time), compiled 2 variants (0.42s CPU time), skipped 0 variants",
    "Serialized binary data for shader Shader Graphs/UrpTriplanar in 0.00s",
    "Shader error in 'Shader Graphs/UrpFoo': Compilation failed (other error) 'out of memory during compilation",
]


@pytest.mark.unit
class TestDefaultClassifier:
    """Test cases for the default pattern set."""

    @pytest.mark.parametrize("text", FAILURE_SAMPLES)
    def test_detects_failure_signature(self, text):
        """Each known failure sample is classified."""
        classifier = create_classifier()

        assert classifier.classify(text)

    @pytest.mark.parametrize("text", BENIGN_SAMPLES)
    def test_ignores_benign_lines(self, text):
        """Ordinary progress output never matches."""
        classifier = create_classifier()

        assert classifier.classify(text) == []

    def test_empty_text(self):
        assert create_classifier().classify("") == []

    def test_shader_error_not_flagged(self):
        """Shader compilation failures only fail the strict set."""
        classifier = create_classifier()

        assert classifier.classify("\n".join(SHADER_LOG)) == []

    def test_case_insensitive(self):
        classifier = create_classifier()

        results = classifier.classify("displayprogressnotification: build failed")

        assert len(results) == 1
        assert results[0].pattern == "DisplayProgressNotification: Build Failed"

    def test_reports_every_matching_pattern_in_order(self):
        """A chunk hit by several signatures yields one result per pattern."""
        classifier = create_classifier()

        results = classifier.classify(MULTILINE_FAILURE)

        assert [r.pattern for r in results] == [
            "DisplayProgressNotification: Build Failed",
            "Error building Player because scripts had compiler errors",
        ]

    def test_result_carries_matched_line(self):
        """The result names the full line containing the match."""
        classifier = create_classifier()

        results = classifier.classify(MULTILINE_FAILURE)

        first = results[0]
        assert first.match == "DisplayProgressNotification: Build Failed"
        assert first.line == "2018-11-05T00:53:44.2566426Z DisplayProgressNotification: Build Failed"
        assert first.text == MULTILINE_FAILURE

    def test_match_in_middle_of_chunk(self):
        text = "line one\r\nfoo.cs(1,1): error CS1002: ; expected\r\nline three\r\n"
        results = create_classifier().classify(text)

        assert len(results) == 1
        assert results[0].match == "error CS1002"
        assert results[0].line == "foo.cs(1,1): error CS1002: ; expected"


@pytest.mark.unit
class TestStrictClassifier:
    """Test cases for the strict pattern set."""

    @pytest.mark.parametrize("text", FAILURE_SAMPLES)
    def test_detects_failure_signature(self, text):
        assert create_classifier("strict").classify(text)

    @pytest.mark.parametrize("text", BENIGN_SAMPLES)
    def test_ignores_benign_lines(self, text):
        assert create_classifier("strict").classify(text) == []

    def test_detects_shader_error(self):
        """Streaming the shader log line by line catches the final error."""
        classifier = create_classifier("strict")

        results = [result for line in SHADER_LOG for result in classifier.classify(line)]

        assert len(results) == 1
        assert results[0].pattern == "Compilation failed"

    def test_detects_compilation_summary(self):
        assert create_classifier("strict").classify("Compilation failed: 634 error(s), 0 warnings")

    def test_strict_is_superset_of_default(self):
        assert set(DEFAULT_PATTERNS) < set(STRICT_PATTERNS)


@pytest.mark.unit
class TestCreateClassifier:
    """Test cases for classifier construction."""

    def test_pattern_set_name_is_case_insensitive(self):
        classifier = create_classifier("STRICT")

        assert classifier.patterns == STRICT_PATTERNS

    def test_unknown_pattern_set(self):
        with pytest.raises(ValidationError) as exc_info:
            create_classifier("lenient")

        assert "pattern_set" in str(exc_info.value)

    def test_extra_patterns_appended(self):
        classifier = create_classifier(extra_patterns=[r"BuildFailedException"])

        assert classifier.patterns[-1] == "BuildFailedException"
        results = classifier.classify("BuildFailedException: Player build failed")
        assert [r.pattern for r in results] == ["BuildFailedException"]

    def test_invalid_extra_pattern(self):
        with pytest.raises(ValidationError) as exc_info:
            create_classifier(extra_patterns=["error ("])

        assert "extra_patterns[0]" in str(exc_info.value)

    def test_custom_classifier(self):
        classifier = ErrorClassifier([r"^FATAL"])

        assert classifier.classify("ok\nFATAL: disk full")[0].line == "FATAL: disk full"
        assert classifier.classify("not FATAL") == []
