"""
Tests for glob based file matching.
"""
import glob
import pytest
from unittest.mock import patch

from bucket_sync.exceptions import ConfigurationError, GlobError
from bucket_sync.services.path_matcher import expand_pattern, match_files


class TestMatchFiles:
    """Test cases for match_files."""

    def test_exclude_single_file(self, file_tree):
        """Test an exclude pattern removes exactly the file it names."""
        result = match_files('fixtures/*', ['fixtures/b.txt'])

        assert result == ['fixtures/a.txt', 'fixtures/c.txt']

    def test_no_excludes_returns_raw_matches(self, file_tree):
        """Test directories and files are returned unfiltered without excludes."""
        result = match_files('dist/*')

        assert result == ['dist/css', 'dist/index.html', 'dist/js']

    def test_recursive_pattern(self, file_tree):
        """Test ** descends into subdirectories."""
        result = match_files('dist/**/*.js')

        assert result == ['dist/js/app.js']

    def test_single_character_wildcard(self, file_tree):
        """Test ? matches exactly one character."""
        result = match_files('fixtures/?.txt', [])

        assert result == ['fixtures/a.txt', 'fixtures/b.txt', 'fixtures/c.txt']

    def test_multiple_exclude_patterns_are_unioned(self, file_tree):
        """Test every exclude pattern contributes to the excluded set."""
        result = match_files('fixtures/*', ['fixtures/a.txt', 'fixtures/c*'])

        assert result == ['fixtures/b.txt']

    def test_exclude_matching_nothing(self, file_tree):
        """Test an exclude pattern without matches leaves the result unchanged."""
        result = match_files('fixtures/*', ['missing/*'])

        assert result == ['fixtures/a.txt', 'fixtures/b.txt', 'fixtures/c.txt']

    def test_exclusion_is_exact_path_membership(self, file_tree):
        """Test excluding a directory does not exclude the files below it."""
        result = match_files('dist/**/*', ['dist/js'])

        assert 'dist/js' not in result
        assert 'dist/js/app.js' in result

    def test_result_is_glob_minus_excluded_union(self, file_tree):
        """Test the result equals the include glob minus all exclude globs."""
        include = 'dist/**/*'
        excludes = ['dist/*.html', 'dist/css/*']

        excluded = set()
        for pattern in excludes:
            excluded.update(glob.glob(pattern, recursive=True))
        expected = [p for p in sorted(glob.glob(include, recursive=True)) if p not in excluded]

        assert match_files(include, excludes) == expected

    def test_no_matches(self, file_tree):
        """Test a pattern without matches returns an empty list."""
        assert match_files('nothing/**/*.bin') == []


class TestExpandPattern:
    """Test cases for pattern expansion errors."""

    def test_empty_pattern(self):
        """Test an empty pattern is a configuration error."""
        with pytest.raises(GlobError):
            expand_pattern('')

    def test_glob_error_is_configuration_error(self):
        """Test GlobError belongs to the configuration error family."""
        assert issubclass(GlobError, ConfigurationError)

    def test_traversal_failure(self):
        """Test filesystem errors are reported as GlobError."""
        with patch('bucket_sync.services.path_matcher.glob.glob', side_effect=OSError('denied')):
            with pytest.raises(GlobError) as exc_info:
                match_files('dist/*')

        assert 'denied' in str(exc_info.value)

    def test_exclude_failure(self, file_tree):
        """Test an exclude pattern that cannot be expanded fails the match."""
        with pytest.raises(GlobError):
            match_files('fixtures/*', [''])


class TestHiddenFiles:
    """Test cases for dot files and directories."""

    @pytest.fixture
    def hidden_tree(self, file_tree):
        (file_tree / 'dist/.htaccess').write_bytes(b'Options -Indexes')
        (file_tree / 'dist/.well-known').mkdir()
        (file_tree / 'dist/.well-known/security.txt').write_bytes(b'Contact: ops@example.com')
        return file_tree

    def test_wildcards_match_dot_files(self, hidden_tree):
        """Test * and ** also select hidden files and directories."""
        result = match_files('dist/**/*')

        assert 'dist/.htaccess' in result
        assert 'dist/.well-known/security.txt' in result
        assert 'dist/index.html' in result

    def test_dot_files_can_be_excluded(self, hidden_tree):
        """Test hidden files are removed by a matching exclude pattern."""
        result = match_files('dist/*', ['dist/.*'])

        assert result == ['dist/css', 'dist/index.html', 'dist/js']
