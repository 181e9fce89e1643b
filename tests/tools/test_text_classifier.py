import pytest

from linkguard.tools.text.classifier import classify_text, count_words, readability_score, sentiment_score


def test_clean_business_text_is_safe(lexicon):
    result = classify_text("Welcome to our company. Contact customer support for help with your order.", lexicon)
    assert result.is_text_safe is True
    assert result.scam_keyword_hits == []
    assert result.legitimacy_score > 0


def test_scam_vocabulary_marks_text_unsafe(lexicon):
    result = classify_text("Double your bitcoin! Send bitcoin now, risk free and guaranteed.", lexicon)
    assert result.is_text_safe is False
    assert "double your bitcoin" in result.scam_keyword_hits
    assert "risk free" in result.scam_keyword_hits
    assert result.scam_keyword_hits == sorted(result.scam_keyword_hits)


def test_spam_keywords_also_count_as_scam_hits(lexicon):
    result = classify_text("Casino bonus inside", lexicon)
    assert "casino" in result.scam_keyword_hits


def test_phishing_patterns_are_reported(lexicon):
    result = classify_text("Verify your account within 24 hours", lexicon)
    assert "Pattern: within\\s+\\d+\\s+(hours?|days?)" in result.phishing_pattern_hits


def test_sentiment_score_bounds():
    assert sentiment_score("") == 0.0
    assert sentiment_score("urgent! act now") < 0
    assert sentiment_score("official and trusted") > 0
    assert -1.0 <= sentiment_score("urgent suspended expired act now") <= 1.0


def test_readability_and_word_count():
    assert count_words("one two  three") == 3
    assert readability_score("") == 0.0
    text = "The cat sat on the mat today. The dog ran in the park after lunch."
    assert 0.0 < readability_score(text) <= 1.0


def test_readability_is_stable_on_long_pages():
    sentence = "The cat sat on the mat today. "
    assert readability_score(sentence * 100) == pytest.approx(readability_score(sentence * 2))
    assert readability_score(sentence * 100) > 0.0


def test_metrics_shape(lexicon):
    metrics = classify_text("Thank you for your order.", lexicon).metrics()
    assert set(metrics) == {
        "scam_keyword_hits",
        "phishing_pattern_hits",
        "legitimacy_score",
        "sentiment_score",
        "readability_score",
        "word_count",
    }
    assert metrics["word_count"] == 5
