from .mock_sub_generator import FailingSubGenerator, RecordingSubGenerator
from .mock_parser import FailingParser, StubParser, make_result

__all__ = ["FailingParser", "FailingSubGenerator", "RecordingSubGenerator", "StubParser", "make_result"]
