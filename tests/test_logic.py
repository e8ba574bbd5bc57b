"""
Tests for the TypeScript scanner, literal context and logic extractor.
"""

from pathlib import Path

import pytest

from ng_i18n_extract.keys import KeyGenerator
from ng_i18n_extract.logic import LogicExtractor, build_context, scan_source
from ng_i18n_extract.logic.context import enclosing_class
from ng_i18n_extract.logic.extractor import is_object_key, lookup_expression
from ng_i18n_extract.logic.scanner import unescape
from ng_i18n_extract.models import FileStatus, SourceKind

COMPONENT_PATH = Path("user-profile.component.ts")


def literal_values(source):
    return [literal.value for literal in scan_source(source).literals]


def find_literal(scanned, value):
    return next(literal for literal in scanned.literals if literal.value == value)


def context_for(source, value):
    scanned = scan_source(source)
    return build_context(scanned, find_literal(scanned, value))


@pytest.fixture
def extractor():
    return LogicExtractor(KeyGenerator("app"))


class TestScanner:
    """Test literal discovery."""

    def test_quotes(self):
        assert literal_values("a('one'); b(\"two\"); c(`three`);") == ["one", "two", "three"]

    def test_comments_are_skipped(self):
        source = "// 'not this'\nconst a = 'this';\n/* \"nor this\" */ const b = \"and this\";"

        assert literal_values(source) == ["this", "and this"]

    def test_regex_literal_is_skipped(self):
        source = "const re = /['\"]/g;\nconst label = 'after it';\n"

        assert literal_values(source) == ["after it"]

    def test_division_is_not_a_regex(self):
        source = "const half = total / 2;\nconst label = 'Half of it';\n"

        assert literal_values(source) == ["Half of it"]

    def test_template_literal_expressions_are_opaque(self):
        source = "const msg = `Hello ${user ? 'a' : 'b'} there`;"
        scanned = scan_source(source)

        assert len(scanned.literals) == 1
        assert scanned.literals[0].quote == "`"
        assert scanned.literals[0].value == "Hello ${user ? 'a' : 'b'} there"

    def test_escaped_quote(self):
        assert literal_values("x = 'Don\\'t go';") == ["Don\\'t go"]

    def test_unterminated_string_is_a_stray_quote(self):
        source = "const s = 'oops\nconst t = 'fine';\n"

        assert literal_values(source) == ["fine"]

    def test_masked_source(self):
        """Test that literal bodies and comments are blanked, offsets kept."""
        source = "a('x y'); // c\nb"
        scanned = scan_source(source)

        assert len(scanned.masked) == len(source)
        assert scanned.masked == "a('   ');     \nb"

    def test_bracket_stack(self):
        scanned = scan_source("foo(['a'])")
        literal = scanned.literals[0]

        assert scanned.brackets_at(literal) == (("(", 3), ("[", 4))
        assert (literal.start, literal.end) == (5, 8)

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Don\\'t", "Don't"),
            ("Line\\nbreak", "Line\nbreak"),
            ("caf\\u00e9", "café"),
            ("\\x41BC", "ABC"),
            ("\\u{1F600}", "\U0001F600"),
            ("back\\\\slash", "back\\slash"),
        ],
    )
    def test_unescape(self, raw, expected):
        assert unescape(raw) == expected


class TestContext:
    """Test where-is-this-literal detection."""

    def test_import(self):
        assert context_for("import { Component } from '@angular/core';", "@angular/core").is_import

    def test_multiline_import(self):
        source = "import {\n  A,\n  B\n} from './things';"

        assert context_for(source, "./things").is_import

    def test_require(self):
        assert context_for("const fs = require('fs-extra');", "fs-extra").is_import

    def test_decorator(self):
        source = "@Component({\n  selector: 'app-x'\n})\nexport class A {}"
        context = context_for(source, "app-x")

        assert context.is_decorator
        assert context.is_object_property

    def test_console(self):
        assert context_for("console.error('Something went wrong');", "Something went wrong").is_console

    def test_throw(self):
        context = context_for("throw new Error('Something broke badly');", "Something broke badly")

        assert context.is_throw
        assert context.is_call_argument

    def test_class_field(self):
        source = "class A {\n  title = 'Hello there';\n}"
        context = context_for(source, "Hello there")

        assert context.is_class_property
        assert context.is_class_level
        assert not context.is_in_method
        assert context.line == "title = 'Hello there';"

    def test_method_body(self):
        source = "class A {\n  save(): void {\n    this.msg = 'Saved it';\n  }\n}"
        context = context_for(source, "Saved it")

        assert context.is_in_method
        assert not context.is_class_property

    def test_arrow_function_field(self):
        source = "class A {\n  handler = () => {\n    alert('Hi there');\n  };\n}"
        context = context_for(source, "Hi there")

        assert context.is_in_method
        assert context.is_call_argument

    def test_array_and_object(self):
        assert context_for("const xs = ['one', 'two'];", "two").is_array_element
        assert context_for("const o = { label: 'Full name' };", "Full name").is_object_property

    def test_control_keyword_is_not_a_call(self):
        assert not context_for("if (role === 'admin') {}", "admin").is_call_argument

    def test_strings_do_not_fake_context(self):
        """Test that keywords inside other strings are ignored."""
        source = "const a = 'import x from ';\nconst b = 'Plain message text';"

        assert not context_for(source, "Plain message text").is_import

    def test_enclosing_class(self):
        source = "const top = 'Top level';\nclass A {\n  inner = 'In class';\n}"
        scanned = scan_source(source)

        assert enclosing_class(scanned, find_literal(scanned, "Top level")) is None
        assert enclosing_class(scanned, find_literal(scanned, "In class")) == source.index("{")

    @pytest.mark.parametrize(
        "source, value, expected, annotation",
        [
            ("class A {\n  title = 'Hello';\n}", "Hello", True, None),
            ("class A {\n  private readonly label: string = 'Account';\n}", "Account", True, "string"),
            ("class A {\n  title$: Observable<string> = 'Hello';\n}", "Hello", True, "Observable<string>"),
            ("class A {\n  items = ['Hello'];\n}", "Hello", False, None),
            ("class A {\n  go() { this.x = 'Hello'; }\n}", "Hello", False, None),
            ("class A {\n  title = cond ? 'Hello' : 'Bye';\n}", "Hello", False, None),
            ("class A {\n  title = label('Hello');\n}", "Hello", False, None),
        ],
    )
    def test_field_initializer(self, source, value, expected, annotation):
        context = context_for(source, value)

        assert context.is_field_initializer is expected
        assert context.field_annotation == annotation

    def test_field_annotation_decides_observable(self):
        source = (
            "class A {\n"
            "  title = 'Hello';\n"
            "  label: string = 'Account';\n"
            "  heading$: Observable<string> = 'Settings';\n"
            "}"
        )

        assert context_for(source, "Hello").accepts_observable
        assert not context_for(source, "Account").accepts_observable
        assert context_for(source, "Settings").accepts_observable

    def test_class_field_annotation_is_not_an_object_property(self):
        context = context_for("class A {\n  mode: 'edit' = 'edit';\n}", "edit")

        assert not context.is_object_property
        assert context.is_type_position

    @pytest.mark.parametrize(
        "source, value",
        [
            ("class A {\n  mode: 'edit mode' | 'view mode' = 'view mode';\n}", "edit mode"),
            ("class A {\n  @Input() size: 'small' = 'small';\n}", "small"),
            ("function f(mode: 'light' | 'dark') {}", "dark"),
            ("export type Theme = 'light theme';", "light theme"),
            ("interface Options {\n  position: 'top left';\n}", "top left"),
            ("const labels: Record<'first name', string> = {};", "first name"),
        ],
    )
    def test_type_position(self, source, value):
        assert context_for(source, value).is_type_position

    def test_union_initializer_is_a_value(self):
        source = "class A {\n  mode: 'edit mode' | 'view mode' = 'view mode';\n}"
        scanned = scan_source(source)

        flags = [build_context(scanned, literal).is_type_position for literal in scanned.literals]

        assert flags == [True, True, False]

    @pytest.mark.parametrize(
        "source, value",
        [
            ("const a = b || 'Fallback text';", "Fallback text"),
            ("const o = { label: 'Full name' };", "Full name"),
            ("class A {\n  title: string = 'Hello';\n}", "Hello"),
        ],
    )
    def test_value_position(self, source, value):
        assert not context_for(source, value).is_type_position

    def test_object_key(self):
        source = "const h = { 'Content-Type': 'application/json' };"
        scanned = scan_source(source)

        assert is_object_key(scanned, find_literal(scanned, "Content-Type"))
        assert not is_object_key(scanned, find_literal(scanned, "application/json"))


class TestLogicExtraction:
    """Test classification and keying of literals."""

    def test_component_entries(self, extractor, component_source):
        entries, _ = extractor.extract(component_source, COMPONENT_PATH)

        assert [entry.text for entry in entries] == [
            "User Profile",
            "Light mode",
            "Dark mode",
            "Profile saved successfully",
            "Changes have been saved",
            "Please fill in all required fields",
        ]
        assert entries[0].key == "app.userProfile.user_profile_1"
        assert entries[3].key == "app.userProfile.profile_saved_successfull_4"

    def test_top_level_literal_is_not_rewritten(self, extractor):
        """Test that literals outside a class are extracted but left in place."""
        entries, substitutions = extractor.extract(
            "export const GREETING = 'Welcome to the app';\n", Path("constants.ts")
        )

        assert [entry.text for entry in entries] == ["Welcome to the app"]
        assert substitutions == []

    def test_object_keys_are_skipped(self, extractor):
        source = (
            "class A {\n"
            "  headers = { 'Content-Type': 'application/json' };\n"
            "  labels = { 'Save': 'Save your changes' };\n"
            "}\n"
        )
        entries, _ = extractor.extract(source, Path("a.ts"))

        assert [entry.text for entry in entries] == ["Save your changes"]

    def test_escaped_text_is_stored_unescaped(self, extractor):
        entries, substitutions = extractor.extract(
            "class A {\n  msg = 'Don\\'t leave yet';\n}\n", Path("a.ts")
        )

        assert entries[0].text == "Don't leave yet"
        assert len(substitutions) == 1

    def test_lookup_expression(self):
        assert lookup_expression("app.x_1") == "this.translate.instant('app.x_1')"
        assert lookup_expression("app.x_1", declarative=True) == "this.translate.get('app.x_1')"


class TestLogicRewrite:
    """Test rewriting component classes."""

    def test_component_rewrite(self, extractor, component_source):
        entries, substitutions = extractor.extract(component_source, COMPONENT_PATH)
        rewritten, applied = extractor.rewrite(component_source, substitutions, COMPONENT_PATH)

        assert applied == len(entries) == 6
        assert (
            "import { Component } from '@angular/core';\n"
            "import { TranslateService } from './shared/translate.service';\n"
        ) in rewritten
        assert "title = this.translate.get('app.userProfile.user_profile_1');" in rewritten
        assert (
            "options = [this.translate.instant('app.userProfile.light_mode_2'), "
            "this.translate.instant('app.userProfile.dark_mode_3')];"
        ) in rewritten
        assert "alert(this.translate.instant('app.userProfile.profile_saved_successfull_4'));" in rewritten
        assert "this.status = this.translate.instant('app.userProfile.changes_have_been_saved_5');" in rewritten
        assert "constructor(private http: HttpClient, private translate: TranslateService) {}" in rewritten

        # Rejected literals stay as they were
        assert "selector: 'app-user-profile'," in rewritten
        assert "theme = 'primary';" in rewritten
        assert "console.log('Saving user profile now');" in rewritten
        assert "throw new Error('TypeError: user is undefined');" in rewritten

    def test_constructor_is_added(self, extractor):
        source = (
            "import { Component } from '@angular/core';\n"
            "\n"
            "export class HomeComponent {\n"
            "  title = 'Welcome home friend';\n"
            "}\n"
        )
        _, substitutions = extractor.extract(source, Path("home.component.ts"))
        rewritten, _ = extractor.rewrite(source, substitutions, Path("home.component.ts"))

        assert rewritten == (
            "import { Component } from '@angular/core';\n"
            "import { TranslateService } from './shared/translate.service';\n"
            "\n"
            "export class HomeComponent {\n"
            "  constructor(private translate: TranslateService) {}\n"
            "\n"
            "  title = this.translate.get('app.home.welcome_home_friend_1');\n"
            "}\n"
        )

    def test_typed_field_uses_instant(self, extractor):
        """Test that a field declared as string is not handed an Observable."""
        source = (
            "export class HomeComponent {\n"
            "  title: string = 'Welcome to our app';\n"
            "  heading$: Observable<string> = 'Your account settings';\n"
            "}\n"
        )
        _, substitutions = extractor.extract(source, Path("home.component.ts"))
        rewritten, applied = extractor.rewrite(source, substitutions, Path("home.component.ts"))

        assert applied == 2
        assert "  title: string = this.translate.instant('app.home.welcome_to_our_app_1');\n" in rewritten
        assert (
            "  heading$: Observable<string> = this.translate.get('app.home.your_account_settings_2');\n"
        ) in rewritten

    def test_literal_types_are_left_alone(self, extractor):
        source = "export class HomeComponent {\n  mode: 'edit mode' | 'view mode' = 'view mode';\n}\n"
        entries, substitutions = extractor.extract(source, Path("home.component.ts"))
        rewritten, applied = extractor.rewrite(source, substitutions, Path("home.component.ts"))

        assert [entry.text for entry in entries] == ["view mode"]
        assert applied == 1
        assert (
            "  mode: 'edit mode' | 'view mode' = this.translate.instant('app.home.view_mode_1');\n"
        ) in rewritten

    def test_nothing_to_rewrite(self, extractor):
        source = "export class A {\n  kind = 'primary';\n}\n"

        assert extractor.rewrite(source, [], Path("a.ts")) == (source, 0)


class TestLogicExtractFile:
    """Test file-level behavior."""

    @pytest.mark.asyncio
    async def test_replace_writes_file(self, temp_dir, component_source):
        path = temp_dir / "user-profile.component.ts"
        path.write_text(component_source, encoding="utf-8")
        extractor = LogicExtractor(KeyGenerator("app"), src_root=temp_dir)

        result = await extractor.extract_file(path, replace=True)

        assert result.kind == SourceKind.LOGIC
        assert result.status == FileStatus.REWRITTEN
        assert result.substitutions == 6
        content = path.read_text(encoding="utf-8")
        assert "from './shared/translate.service';" in content
        assert "this.translate.get('app.userProfile.user_profile_1')" in content

    @pytest.mark.asyncio
    async def test_dry_run_leaves_file_untouched(self, extractor, temp_dir, component_source):
        path = temp_dir / "user-profile.component.ts"
        path.write_text(component_source, encoding="utf-8")

        result = await extractor.extract_file(path)

        assert result.status == FileStatus.EXTRACTED
        assert len(result.entries) == 6
        assert path.read_text(encoding="utf-8") == component_source

    @pytest.mark.asyncio
    async def test_unreadable_file_is_skipped(self, extractor, temp_dir, caplog):
        path = temp_dir / "broken.ts"
        path.write_bytes(b"const a = '\xff\xfe';\n")

        result = await extractor.extract_file(path)

        assert result.skipped
        assert result.entries == []
        assert "Skipping TypeScript file" in caplog.text
