import pytest

from lofi import parse_sections


@pytest.fixture(scope="session")
def sample_text():
    return """Name #field
Password #field #password

above #first
top1 #second: 2nd
- inner1 #third
- @inner2.and.then.some #fourth
@top2 #fifth: @mentioning.something
- inner3 #sixth
- inner4 #seventh
below #eighth
"""


@pytest.fixture
def document(sample_text):
    return parse_sections(sample_text)


@pytest.fixture
def lofi_file(tmp_path, sample_text):
    path = tmp_path / "form.lofi"
    path.write_text(sample_text, encoding="utf-8")
    return path
