from freelance_ledger.extraction import EntityMatch, extract_entities


def test_from_client_for_project_with_reference_suffix():
    got = extract_entities("Payment from John D. for project Website Redesign (ref 123)")
    assert got == EntityMatch(project_name="Website Redesign", client_name="John D.")


def test_client_parenthetical_is_dropped():
    got = extract_entities("Done Milestone Payment from Jane S. (jane_s) for project API Work")
    assert got.client_name == "Jane S."
    assert got.project_name == "API Work"


def test_fee_taken_captures_project_in_parentheses():
    got = extract_entities("Project fee taken (Mobile App &amp; Backend)")
    assert got == EntityMatch(project_name="Mobile App & Backend", client_name=None)


def test_for_project_without_client():
    got = extract_entities("Hourly project fee for project Support Retainer (week 3)")
    assert got == EntityMatch(project_name="Support Retainer", client_name=None)


def test_matching_is_case_insensitive():
    got = extract_entities("TRANSFER FROM Acme Co FOR PROJECT Logo Pack")
    assert got == EntityMatch(project_name="Logo Pack", client_name="Acme Co")


def test_no_match_yields_empty_pair():
    assert extract_entities("Express withdrawal to bank") == EntityMatch(None, None)


def test_custom_extractor_chain_stops_at_first_hit():
    calls: list[str] = []

    def first(text: str) -> EntityMatch | None:
        calls.append("first")
        return None

    def second(text: str) -> EntityMatch | None:
        calls.append("second")
        return EntityMatch("P", "C")

    def third(text: str) -> EntityMatch | None:  # pragma: no cover - never reached
        calls.append("third")
        return None

    assert extract_entities("x", (first, second, third)) == EntityMatch("P", "C")
    assert calls == ["first", "second"]
