import json

import pytest
import soundfile as sf

from conftest import SAMPLE_RATE
from speechcoach.cli import main


def test_stats_command(tmp_path, capsys):
    transcript = tmp_path / "transcript.txt"
    transcript.write_text("Um, the cat sat on the mat. The cat was happy.", encoding="utf-8")

    assert main(["stats", str(transcript), "--duration", "60"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["total_words"] == 11
    assert output["filler_word_breakdown"] == {"um": 1}
    assert output["top_words"][0] == {"word": "cat", "count": 2}
    assert output["words_per_minute"] == 11.0


def test_trim_command(tmp_path, capsys, mixed_audio):
    source = tmp_path / "take.wav"
    sf.write(str(source), mixed_audio, SAMPLE_RATE)

    assert main(["trim", str(source), "--output-dir", str(tmp_path / "out")]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["trimmed"] is True
    assert sf.info(output["audio_path"]).duration < 4.0


def test_trim_missing_file_exits_nonzero(tmp_path):
    assert main(["trim", str(tmp_path / "missing.wav")]) == 1


def test_transcribe_without_key_exits_nonzero(tmp_path, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    audio = tmp_path / "take.wav"
    audio.write_bytes(b"RIFF")
    assert main(["transcribe", str(audio)]) == 1


def test_coach_rejects_unknown_style(tmp_path, capsys):
    transcript = tmp_path / "transcript.txt"
    transcript.write_text("Hello everyone.", encoding="utf-8")

    with pytest.raises(SystemExit) as info:
        main(["coach", str(transcript), "--style", "harsh"])

    assert info.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_bad_model_in_environment_exits_nonzero(tmp_path, monkeypatch):
    monkeypatch.setenv("OPENAI_COACHING_MODEL", "gpt-2")
    transcript = tmp_path / "transcript.txt"
    transcript.write_text("Hello everyone.", encoding="utf-8")

    assert main(["coach", str(transcript)]) == 1
