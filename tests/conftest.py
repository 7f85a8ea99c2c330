"""
Pytest configuration and shared fixtures
"""

import shutil
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing"""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding input/expected source pairs"""
    return FIXTURES_DIR


@pytest.fixture
def unsorted_source() -> str:
    """Small TypeScript module with declarations out of order"""
    return """import { readFile } from "fs";

export function zeta(): number {
  return 26;
}

export function alpha(): number {
  return 1;
}
"""


@pytest.fixture
def sorted_source() -> str:
    """The sorted form of unsorted_source"""
    return """import { readFile } from "fs";

export function alpha(): number {
  return 1;
}

export function zeta(): number {
  return 26;
}
"""


@pytest.fixture
def sample_class_source() -> str:
    """Class with members of every visibility tier"""
    return """class Account {
  private balance = 0;

  constructor() {
    this.balance = 0;
  }

  private audit(): void {
    log("audit");
  }

  protected reset(): void {
    this.balance = 0;
  }

  static create(): Account {
    return new Account();
  }

  public deposit(amount: number): void {
    this.balance += amount;
  }

  withdraw(amount: number): void {
    this.balance -= amount;
  }

  public static fromJson(json: string): Account {
    return new Account();
  }
}
"""


@pytest.fixture
def source_project(temp_dir: Path, unsorted_source: str) -> Path:
    """Create a small project tree with sortable and ignored files"""
    project = temp_dir / "project"
    (project / "src" / "utils").mkdir(parents=True)
    (project / "node_modules" / "lib").mkdir(parents=True)

    (project / "src" / "index.ts").write_text(unsorted_source)
    (project / "src" / "utils" / "helpers.js").write_text(
        "function b() {\n  return 2;\n}\n\nfunction a() {\n  return 1;\n}\n"
    )
    (project / "src" / "notes.md").write_text("# Notes\n")
    (project / "node_modules" / "lib" / "index.js").write_text(
        "function z() {}\n\nfunction y() {}\n"
    )
    return project
