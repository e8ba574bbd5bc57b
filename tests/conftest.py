"""
Shared fixtures for the extractor test suite.
"""

import os
import textwrap
from pathlib import Path

import pytest

from ng_i18n_extract.config import Settings, reset_settings
from ng_i18n_extract.keys import KeyGenerator
from ng_i18n_extract.session import ExtractionSession

USER_PROFILE_COMPONENT = textwrap.dedent(
    """\
    import { Component } from '@angular/core';

    @Component({
      selector: 'app-user-profile',
      templateUrl: './user-profile.component.html'
    })
    export class UserProfileComponent {
      title = 'User Profile';
      theme = 'primary';
      options = ['Light mode', 'Dark mode'];

      constructor(private http: HttpClient) {}

      save(): void {
        console.log('Saving user profile now');
        alert('Profile saved successfully');
        this.status = 'Changes have been saved';
        if (!this.valid) {
          throw new Error('Please fill in all required fields');
        }
        throw new Error('TypeError: user is undefined');
      }
    }
    """
)

USER_PROFILE_TEMPLATE = textwrap.dedent(
    """\
    <div class="profile">
      <h1>User Profile</h1>
      <p>This is <strong>important</strong> information</p>
      <img src="assets/logo.png" alt="Company logo">
      <button (click)="save()">Save</button>
      <span>{{ user.name }}</span>
    </div>
    """
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep NG_I18N_* variables and the settings singleton out of every test."""
    for name in list(os.environ):
        if name.startswith("NG_I18N_"):
            monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Temporary working directory."""
    return tmp_path


@pytest.fixture
def src_dir(temp_dir) -> Path:
    path = temp_dir / "src"
    path.mkdir()
    return path


@pytest.fixture
def settings(temp_dir, src_dir) -> Settings:
    """Dry-run settings pointing at the temporary source tree."""
    return Settings(
        src_path=src_dir,
        output_path=temp_dir / "i18n" / "messages.json",
        key_prefix="app",
        locale="en",
    )


@pytest.fixture
def session(settings) -> ExtractionSession:
    return ExtractionSession(settings)


@pytest.fixture
def key_generator() -> KeyGenerator:
    return KeyGenerator("app")


@pytest.fixture
def sample_app(src_dir) -> Path:
    """A small Angular app: one component with template and class."""
    component_dir = src_dir / "app" / "user-profile"
    component_dir.mkdir(parents=True)
    (component_dir / "user-profile.component.ts").write_text(USER_PROFILE_COMPONENT, encoding="utf-8")
    (component_dir / "user-profile.component.html").write_text(USER_PROFILE_TEMPLATE, encoding="utf-8")
    (component_dir / "user-profile.component.spec.ts").write_text(
        "describe('UserProfileComponent', () => { it('should create the page', () => {}); });\n",
        encoding="utf-8",
    )
    return src_dir


@pytest.fixture
def component_source() -> str:
    return USER_PROFILE_COMPONENT


@pytest.fixture
def template_source() -> str:
    return USER_PROFILE_TEMPLATE
