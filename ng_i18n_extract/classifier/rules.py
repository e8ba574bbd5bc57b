"""
Pattern rules used by the display-text classifier.

Each rule is a named regular expression. The battery is evaluated in order and
the first match decides, so the name of the matching rule doubles as the
reason a string was rejected.
"""

import re
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class PatternRule:
    """A named pattern tested against a trimmed candidate string."""

    name: str
    pattern: re.Pattern
    description: str = ""

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def rule(name: str, pattern: str, description: str = "", flags: int = 0) -> PatternRule:
    return PatternRule(name, re.compile(pattern, flags), description)


def first_match(rules: Sequence[PatternRule], text: str) -> Optional[PatternRule]:
    """Return the first rule in ``rules`` that matches ``text``."""
    for candidate in rules:
        if candidate.matches(text):
            return candidate
    return None


# Digits, whitespace and punctuation only: "123", "...", "--", "(1/2)"
NOISE_RULE = rule("noise", r"^[\d\s\-_.,;:!?()\[\]{}/\\+*=#%&|'\"<>~^]+$", "no letters")

# Text the extractor (or a developer) already turned into a lookup
PLACEHOLDER_RULES: Tuple[PatternRule, ...] = (
    rule("translation_key", r"^[A-Za-z0-9_]+(?:\.[A-Za-z0-9_]+)+$", "dotted key such as app.save_1"),
    rule("template_interpolation", r"\$\{.*?\}", "${...} template expression", re.S),
    rule("markup_interpolation", r"\{\{.*?\}\}", "{{ ... }} binding", re.S),
    rule("i18n_asset", r"assets/i18n/.*\.json", "translation bundle path"),
)

# Shapes of strings that belong to the code, not to the user
CODE_SHAPE_RULES: Tuple[PatternRule, ...] = (
    # Modules and paths
    rule("scoped_package", r"^@[\w-]+/[\w./-]+$", "@angular/core"),
    rule("angular_path", r"^(?:app|src)/", "src/app/components"),
    rule("package_path", r"^[\w-]+(?:/[\w.-]+)+$", "rxjs/operators, application/json"),
    rule("url", r"^[a-zA-Z][\w+.-]*://", "any protocol prefix"),
    rule("pseudo_url", r"^(?:mailto|tel|data|javascript):", "mailto:, data: ..."),
    rule("local_address", r"^(?:localhost|127\.0\.0\.1)\b", "localhost:4200"),
    rule("absolute_path", r"^/[\w./-]*$", "/api/users"),
    rule("relative_path", r"^\.{1,2}/[\w./-]*$", "./config/app.json"),
    rule("home_path", r"^~/", "~/projects"),
    rule("windows_path", r"^[a-zA-Z]:[\\/]", r"C:\temp"),
    rule("file_name", r"^[\w./-]+\.(?:js|ts|html|css|scss|json|xml|ya?ml|svg|png|jpe?g|gif)$",
         "logo.png", re.I),
    rule("api_or_asset_path", r"/(?:api|assets)/", "…/api/…"),
    # Identifiers
    rule("identifier", r"^[a-zA-Z_$][a-zA-Z0-9_$]*$", "userId, user_id, Submit"),
    rule("constant", r"^[A-Z_][A-Z0-9_]*$", "API_KEY"),
    rule("property_access", r"^[\w$]+(?:\.[\w$]+)+(?:\(\))?$", "user.name, this.save()"),
    rule("angular_directive", r"^ng[A-Z]", "ngOnInit, ngModel"),
    rule("angular_class", r"^[A-Z]\w*(?:Component|Service|Directive|Pipe|Guard|Resolver|Module)$",
         "UserService"),
    # Styling
    rule("hex_color", r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$", "#ffffff"),
    rule("css_declaration", r"^[a-z-]+\s*:\s*[\w#().%,-]+;?$", "color:red"),
    rule("css_class", r"^\.[\w-]+$", ".btn-primary"),
    rule("css_id", r"^#[\w-]+$", "#main-content"),
    # Technical constants
    rule("version", r"^v?\d+\.\d+(?:\.\d+)?(?:[-+][\w.-]+)?$", "1.2.3, 2.0.0-beta"),
    rule("hex_hash", r"^[a-f0-9]{8,}$", "abc123def456"),
    rule("http_method", r"^(?:GET|POST|PUT|DELETE|PATCH|HEAD|OPTIONS)$", "GET"),
    rule("encoding", r"^(?:utf-?8|utf-?16|ascii|latin-?1|base64|json|xml|html|css|js|ts)$",
         "utf-8", re.I),
    rule("mime_type", r"^(?:text|application|image|audio|video|font|multipart)/[\w.+-]+$",
         "text/plain", re.I),
    # Naming conventions
    rule("camel_case", r"^[a-z][a-z0-9]*(?:[A-Z][a-z0-9]*)+$", "someVariable"),
    rule("kebab_case", r"^[a-z0-9]+(?:-[a-z0-9]+)+$", "app-user, utf-8"),
)

# Error messages that read like stack traces or codes
TECHNICAL_ERROR_RULES: Tuple[PatternRule, ...] = (
    rule("error_class", r"\b[A-Z][A-Za-z]*Error\b", "TypeError"),
    rule("null_reference", r"\b(?:undefined|null|NaN)\b", "x is undefined"),
    rule("function_call", r"[\w$]+\([^)]*\)", "failed to connect()"),
    rule("member_reference", r"\b[\w$]+\.[\w$]+", "user.profile"),
    rule("error_code", r"^[A-Z_][A-Z0-9_]*$", "INVALID_CREDENTIALS"),
)

# Vocabulary that marks a lone class-level string as meant for people
CONVERSATIONAL_RULE = rule(
    "conversational",
    r"welcome|hello|thank|please|error|warning|success|message|click|button"
    r"|save|cancel|submit|login|logout|sign|your|you|we|our|this|that|here|there",
    "UI vocabulary",
    re.I,
)

MULTI_WORD_RULE = rule("multi_word", r"\S\s+\S", "two or more words")
