from polybets.core.text_match import word_boundary_match


def test_standalone_ticker_matches_case_insensitively():
    assert word_boundary_match("ETH is great", "eth") is True
    assert word_boundary_match("Buy Eth. Now", "eth") is True


def test_ticker_inside_longer_word_does_not_match():
    assert word_boundary_match("Ethereum is great", "eth") is False
    assert word_boundary_match("a new method", "eth") is False
    assert word_boundary_match("brush your teeth", "eth") is False


def test_empty_term_never_matches():
    assert word_boundary_match("anything at all", "") is False


def test_multi_word_term_matches():
    assert word_boundary_match("is this the memecoin or the meme coin season", "meme coin") is True


def test_metacharacters_are_matched_literally():
    assert word_boundary_match("a.b token", "a.b") is True
    assert word_boundary_match("axb token", "a.b") is False
    assert word_boundary_match("price (usd)", "(usd") is False
    assert word_boundary_match("will s&p hit 6000", "s&p") is True


def test_non_ascii_letters_act_as_boundaries():
    assert word_boundary_match("éth", "th") is True
