"""
TranslateService scaffolding and wiring.

Rewritten component classes call ``this.translate.get(...)`` or
``this.translate.instant(...)``. This module makes that compile:

* writes ``<src>/shared/translate.service.ts`` when it does not exist,
* adds ``HttpClientModule`` to ``app.module.ts`` (the service loads the
  artifact over HTTP),
* adds the service import and constructor injection to a rewritten file.
"""

import os
import re
from pathlib import Path
from typing import Optional, Tuple

from ng_i18n_extract.logic.scanner import scan_source
from ng_i18n_extract.utils.errors import SourceFileError, SourceWriteError
from ng_i18n_extract.utils.files import read_source, write_source
from ng_i18n_extract.utils.logging import get_logger

logger = get_logger(__name__)

SERVICE_CLASS = "TranslateService"
SERVICE_FILE = "translate.service.ts"
SERVICE_PARAMETER = f"private translate: {SERVICE_CLASS}"
APP_MODULE_CANDIDATES = ("app.module.ts", os.path.join("app", "app.module.ts"))

TRANSLATE_SERVICE_TEMPLATE = """import { Injectable } from '@angular/core';
import { HttpClient } from '@angular/common/http';
import { Observable, of } from 'rxjs';
import { map, catchError } from 'rxjs/operators';

@Injectable({
  providedIn: 'root'
})
export class TranslateService {
  private translations: { [key: string]: string } = {};
  private currentLang = 'en';

  constructor(private http: HttpClient) {}

  get(key: string): Observable<string> {
    return of(this.instant(key));
  }

  instant(key: string): string {
    // Fall back to the key itself until translations are loaded
    return this.translations[key] ?? key;
  }

  setDefaultLang(lang: string): void {
    this.currentLang = lang;
  }

  use(lang: string): Observable<any> {
    this.currentLang = lang;
    return this.loadTranslations(lang);
  }

  private loadTranslations(lang: string): Observable<any> {
    const url = `assets/i18n/${lang}.json`;
    return this.http.get(url).pipe(
      map((artifact: any) => {
        this.translations = { ...this.translations, ...artifact.translations };
        return artifact;
      }),
      catchError(() => {
        console.warn(`Could not load translations for ${lang}`);
        return of({});
      })
    );
  }
}
"""

_SERVICE_IMPORT_RE = re.compile(r"import\s*\{[^}]*\b" + SERVICE_CLASS + r"\b[^}]*\}\s*from")
_CORE_IMPORT_RE = re.compile(r"import\s[^;]*?from\s*['\"]@angular/core['\"]\s*;?[^\n]*\n?", re.S)
_IMPORT_STATEMENT_RE = re.compile(r"^import\s[^;]*?;[^\n]*\n?", re.S | re.M)
_CONSTRUCTOR_RE = re.compile(r"\bconstructor\s*\(")
_CLASS_OPEN_RE = re.compile(r"\bclass\s+[\w$]+[^{;]*\{")
_INJECTED_RE = re.compile(r"\btranslate\s*:\s*" + SERVICE_CLASS + r"\b")
_NGMODULE_IMPORTS_RE = re.compile(r"\bimports\s*:\s*\[")


# =============================================================================
# Import paths
# =============================================================================


def relative_service_import(file_path: Path, root: Path, shared_dir: str = "shared") -> str:
    """
    Module specifier for the shared service as seen from ``file_path``.

    Examples:
        src/app.component.ts -> ./shared/translate.service
        src/app/users/list.component.ts -> ../../shared/translate.service
    """
    target = Path(root) / shared_dir / SERVICE_FILE[: -len(".ts")]
    relative = os.path.relpath(target, Path(file_path).parent).replace(os.sep, "/")
    return relative if relative.startswith(".") else f"./{relative}"


# =============================================================================
# Per-file wiring
# =============================================================================


def ensure_service_import(content: str, import_path: str) -> str:
    """Add ``import { TranslateService } ...`` unless one is present."""
    if _SERVICE_IMPORT_RE.search(content):
        return content

    statement = f"import {{ {SERVICE_CLASS} }} from '{import_path}';\n"
    match = _CORE_IMPORT_RE.search(content)
    if match is None:
        return statement + content

    end = match.end()
    if not content[:end].endswith("\n"):
        statement = "\n" + statement
    return content[:end] + statement + content[end:]


def ensure_constructor_injection(content: str) -> str:
    """
    Inject ``private translate: TranslateService`` into the first class.

    Extends an existing constructor's parameter list, or adds an empty
    constructor right after the class opens.
    """
    masked = scan_source(content).masked

    constructor = _CONSTRUCTOR_RE.search(masked)
    if constructor is not None:
        open_paren = constructor.end() - 1
        close_paren = _matching(masked, open_paren, "(", ")")
        if close_paren is None:
            return content
        params = content[open_paren + 1 : close_paren]
        if _INJECTED_RE.search(params):
            return content
        return content[: open_paren + 1] + _append_item(params, SERVICE_PARAMETER) + content[close_paren:]

    if _INJECTED_RE.search(masked):
        return content

    class_open = _CLASS_OPEN_RE.search(masked)
    if class_open is None:
        logger.debug("No class to inject the translate service into")
        return content

    insert_at = class_open.end()
    indent = _member_indent(content, insert_at)
    constructor_src = f"\n{indent}constructor({SERVICE_PARAMETER}) {{}}\n"
    return content[:insert_at] + constructor_src + content[insert_at:]


def wire_lookup_service(content: str, import_path: str) -> str:
    """Import and inject the service into rewritten component source."""
    return ensure_constructor_injection(ensure_service_import(content, import_path))


def _append_item(items: str, item: str) -> str:
    """Append ``item`` to a comma-separated list, following its layout."""
    stripped = items.rstrip()
    if not stripped.strip():
        return item

    trailing = items[len(stripped) :]
    separator = "" if stripped.endswith(",") else ","
    if "\n" in stripped:
        last_line = stripped[stripped.rfind("\n") + 1 :]
        indent = last_line[: len(last_line) - len(last_line.lstrip())]
        return f"{stripped}{separator}\n{indent}{item}{trailing}"
    return f"{stripped}{separator} {item}{trailing}"


def _member_indent(content: str, offset: int) -> str:
    """Indentation of the first member line after ``offset``; two spaces if none."""
    for line in content[offset:].splitlines():
        if line.strip():
            indent = line[: len(line) - len(line.lstrip())]
            return indent or "  "
    return "  "


def _matching(masked: str, start: int, opener: str, closer: str) -> Optional[int]:
    depth = 0
    for index in range(start, len(masked)):
        if masked[index] == opener:
            depth += 1
        elif masked[index] == closer:
            depth -= 1
            if depth == 0:
                return index
    return None


# =============================================================================
# Project scaffolding
# =============================================================================


async def ensure_lookup_service(root: Path, shared_dir: str = "shared") -> Optional[Path]:
    """
    Create the shared TranslateService unless it already exists.

    Returns:
        Path of the created file, or None if nothing was written

    Raises:
        SourceWriteError: If the service file cannot be written
    """
    service_path = Path(root) / shared_dir / SERVICE_FILE
    if service_path.exists():
        logger.info(f"TranslateService already exists at {service_path}")
        return None

    try:
        service_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SourceWriteError(str(service_path), str(e)) from e

    await write_source(service_path, TRANSLATE_SERVICE_TEMPLATE)
    logger.info(f"Created TranslateService at {service_path}")
    return service_path


def add_http_client_module(content: str) -> str:
    """Import ``HttpClientModule`` and list it in the NgModule ``imports`` array."""
    if "HttpClientModule" in content:
        return content

    statement = "import { HttpClientModule } from '@angular/common/http';\n"
    imports = list(_IMPORT_STATEMENT_RE.finditer(content))
    if not imports:
        content = statement + content
    else:
        end = imports[-1].end()
        prefix = "" if content[:end].endswith("\n") else "\n"
        content = content[:end] + prefix + statement + content[end:]

    masked = scan_source(content).masked
    imports_array = _NGMODULE_IMPORTS_RE.search(masked)
    if imports_array is None:
        return content

    open_bracket = imports_array.end() - 1
    close_bracket = _matching(masked, open_bracket, "[", "]")
    if close_bracket is None:
        return content

    items = content[open_bracket + 1 : close_bracket]
    return content[: open_bracket + 1] + _append_item(items, "HttpClientModule") + content[close_bracket:]


def find_app_module(root: Path) -> Optional[Path]:
    for candidate in APP_MODULE_CANDIDATES:
        path = Path(root) / candidate
        if path.is_file():
            return path
    return None


async def ensure_http_client_module(root: Path) -> Tuple[Optional[Path], bool]:
    """
    Register ``HttpClientModule`` in the application module.

    Returns:
        The module path (None if not found) and whether it was changed
    """
    module_path = find_app_module(root)
    if module_path is None:
        logger.warning("Could not find app.module.ts to configure HttpClientModule")
        return None, False

    try:
        content = await read_source(module_path)
        updated = add_http_client_module(content)
        if updated == content:
            return module_path, False
        await write_source(module_path, updated)
    except SourceFileError as e:
        logger.warning(f"Could not update {module_path}: {e.reason}")
        return module_path, False

    logger.info(f"Updated {module_path} to include HttpClientModule")
    return module_path, True
