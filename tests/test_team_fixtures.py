import pytest

from builders import make_players, play_pending, ranked_groups
from chaveamento.constants import BYE_MARKER
from chaveamento.exceptions import (
    BracketStateException,
    HasResults,
    InsufficientGroups,
    InvalidResultException,
)
from chaveamento.formats import create_format
from chaveamento.models import (
    Entrant,
    EntrantKind,
    Match,
    MatchStatus,
    Side,
    StageConfig,
    StageState,
)
from chaveamento.pairing import get_team_crossing
from chaveamento.tournament import TeamFixtureBuilder


def _config(**kwargs):
    return StageConfig(format_tag="teams", **kwargs)


def _players(count, genders=""):
    players = make_players(count)
    for player, gender in zip(players, genders):
        player.gender = gender
    return players


def _teams(players, size):
    return [
        Entrant(
            id=f"t{n}",
            display_name=f"Time {n}",
            kind=EntrantKind.TEAM,
            registration_order=n,
            member_ids=tuple(p.id for p in players[i : i + size]),
        )
        for n, i in enumerate(range(0, len(players), size), start=1)
    ]


def _fixture(players, size):
    lookup = {p.id: p for p in players + _teams(players, size)}
    match = Match(
        id="m1",
        group_id="g1",
        round_label="Rodada 1",
        round_number=1,
        side_a=("t1",),
        side_b=("t2",),
    )
    return match, lookup


def _sides(game):
    return game.side_a, game.side_b


def _two_team_stage(orchestrator, genders="FMFMFMFM"):
    config = _config(
        team_formation="manual",
        manual_teams=[["p1", "p2", "p3", "p4"], ["p5", "p6", "p7", "p8"]],
    )
    stage = orchestrator.create_stage(_players(8, genders), config, "s1")
    orchestrator.generate_groups(stage)
    return stage, next(iter(stage.matches.values()))


# ----------------------------------------------------------------------
# Line-ups
# ----------------------------------------------------------------------


def test_teams_of_four_play_two_games_in_team_order():
    match, lookup = _fixture(_players(8), 4)

    games = TeamFixtureBuilder(4).attach_games(match, lookup)

    assert [g.id for g in games] == ["m1:j1", "m1:j2"]
    assert [g.round_label for g in games] == ["livre", "livre"]
    assert _sides(games[0]) == (("p1", "p2"), ("p5", "p6"))
    assert _sides(games[1]) == (("p3", "p4"), ("p7", "p8"))
    assert all(g.parent_id == "m1" and g.group_id == "g1" for g in games)
    assert match.is_team_fixture


def test_mixed_teams_of_four_play_a_women_and_a_men_game():
    match, lookup = _fixture(_players(8, "FMFMMFMF"), 4)

    games = TeamFixtureBuilder(4).attach_games(match, lookup)

    assert [g.round_label for g in games] == ["feminino", "masculino"]
    assert _sides(games[0]) == (("p1", "p3"), ("p6", "p8"))
    assert _sides(games[1]) == (("p2", "p4"), ("p5", "p7"))


def test_mixed_teams_of_six_add_a_mixed_game():
    match, lookup = _fixture(_players(12, "FFFMMMMFMFMF"), 6)

    games = TeamFixtureBuilder(6).attach_games(match, lookup)

    assert [g.round_label for g in games] == ["feminino", "masculino", "misto"]
    assert _sides(games[2]) == (("p3", "p6"), ("p12", "p11"))


def test_single_gender_teams_name_their_games_after_it():
    match, lookup = _fixture(_players(8, "MMMMMMMM"), 4)

    games = TeamFixtureBuilder(4).attach_games(match, lookup)

    assert [g.round_label for g in games] == ["masculino", "masculino"]


def test_line_ups_are_shuffled_reproducibly_with_a_seed():
    players = _players(8)

    def line_up():
        match, lookup = _fixture(players, 4)
        games = TeamFixtureBuilder(4, random_seed=11).attach_games(match, lookup)
        return [_sides(g) for g in games]

    first = line_up()
    assert first == line_up()
    assert sorted(p for a, _ in first for p in a) == ["p1", "p2", "p3", "p4"]


def test_games_are_not_attached_twice():
    match, lookup = _fixture(_players(8), 4)
    builder = TeamFixtureBuilder(4)
    builder.attach_games(match, lookup)

    assert builder.attach_games(match, lookup) == []
    assert len(match.sub_matches) == 2


# ----------------------------------------------------------------------
# Settling a fixture
# ----------------------------------------------------------------------


def test_two_games_won_decide_a_team_of_four_fixture(recorder):
    match, lookup = _fixture(_players(8), 4)
    builder = TeamFixtureBuilder(4)
    first, second = builder.attach_games(match, lookup)

    recorder.record_sets(first, [(6, 2)])
    builder.settle(match, lookup)
    assert match.status == MatchStatus.IN_PROGRESS
    assert match.winner is None

    recorder.record_sets(second, [(6, 4)])
    assert builder.settle(match, lookup) is None

    assert match.status == MatchStatus.FINISHED
    assert match.winner is Side.A
    assert match.sets_won(Side.A) == 2
    assert match.games_won(Side.A) == 12
    assert match.games_won(Side.B) == 6


def test_split_games_add_a_mixed_decider(recorder):
    match, lookup = _fixture(_players(8, "FMFMMFMF"), 4)
    builder = TeamFixtureBuilder(4)
    first, second = builder.attach_games(match, lookup)
    recorder.record_sets(first, [(6, 2)])
    recorder.record_sets(second, [(3, 6)])

    decider = builder.settle(match, lookup)

    assert decider.id == "m1:j3"
    assert decider.round_label == "decider"
    assert _sides(decider) == (("p1", "p2"), ("p6", "p5"))
    assert match.status == MatchStatus.IN_PROGRESS

    recorder.record_sets(decider, [(4, 6)])
    builder.settle(match, lookup)
    assert match.winner is Side.B
    assert match.sets_won(Side.B) == 2


def test_teams_of_six_need_all_three_games(recorder):
    match, lookup = _fixture(_players(12), 6)
    builder = TeamFixtureBuilder(6)
    games = builder.attach_games(match, lookup)
    recorder.record_sets(games[0], [(6, 2)])
    recorder.record_sets(games[1], [(1, 6)])

    assert builder.settle(match, lookup) is None
    assert len(match.sub_matches) == 3
    assert match.status == MatchStatus.IN_PROGRESS

    recorder.record_sets(games[2], [(7, 5)])
    builder.settle(match, lookup)
    assert match.winner is Side.A


def test_decider_is_dropped_when_a_correction_settles_the_games(recorder):
    match, lookup = _fixture(_players(8), 4)
    builder = TeamFixtureBuilder(4)
    first, second = builder.attach_games(match, lookup)
    recorder.record_sets(first, [(6, 2)])
    recorder.record_sets(second, [(3, 6)])
    builder.settle(match, lookup)

    builder.check_correction(match, second)
    recorder.correct_sets(second, [(6, 3)])
    builder.settle(match, lookup)

    assert [g.id for g in match.sub_matches] == ["m1:j1", "m1:j2"]
    assert match.winner is Side.A


def test_games_cannot_be_corrected_after_the_decider(recorder):
    match, lookup = _fixture(_players(8), 4)
    builder = TeamFixtureBuilder(4)
    first, second = builder.attach_games(match, lookup)
    recorder.record_sets(first, [(6, 2)])
    recorder.record_sets(second, [(3, 6)])
    decider = builder.settle(match, lookup)
    recorder.record_sets(decider, [(6, 0)])
    builder.settle(match, lookup)

    with pytest.raises(InvalidResultException):
        builder.check_correction(match, first)
    builder.check_correction(match, decider)


# ----------------------------------------------------------------------
# Team fixtures in a stage
# ----------------------------------------------------------------------


def test_team_fixture_is_played_through_its_games(orchestrator):
    stage, fixture = _two_team_stage(orchestrator)

    pending = orchestrator.pending_matches(stage)
    assert [g.id for g in pending] == [f"{fixture.id}:j1", f"{fixture.id}:j2"]
    with pytest.raises(InvalidResultException):
        orchestrator.record_result(stage, fixture.id, [(6, 2)])

    play_pending(orchestrator, stage)

    assert fixture.status == MatchStatus.FINISHED
    assert fixture.winner is Side.A
    row = next(
        r
        for r in stage.standings[fixture.group_id]
        if r.entrant_id == fixture.side_a[0]
    )
    assert (row.sets_for, row.sets_against) == (2, 0)
    assert (row.games_for, row.games_against) == (12, 4)
    assert stage.state == StageState.GROUPS_COMPLETE


def test_game_sides_follow_the_players_gender(orchestrator):
    stage, fixture = _two_team_stage(orchestrator)
    lookup = stage.entrant_lookup()

    women, men = fixture.sub_matches

    assert {lookup[p].gender for p in women.participants} == {"F"}
    assert {lookup[p].gender for p in men.participants} == {"M"}


def test_split_fixture_waits_for_its_decider(orchestrator):
    stage, fixture = _two_team_stage(orchestrator)
    first, second = fixture.sub_matches

    orchestrator.record_result(stage, first.id, [(6, 3)])
    orchestrator.record_result(stage, second.id, [(4, 6)])

    decider = fixture.sub_matches[2]
    assert decider.round_label == "decider"
    assert [m.id for m in orchestrator.pending_matches(stage)] == [decider.id]
    assert stage.state == StageState.GROUPS_GENERATED

    orchestrator.record_result(stage, decider.id, [(2, 6)])

    assert fixture.winner is Side.B
    assert stage.state == StageState.GROUPS_COMPLETE


def test_walkover_closes_the_open_games(orchestrator):
    stage, fixture = _two_team_stage(orchestrator)
    orchestrator.record_result(stage, fixture.sub_matches[0].id, [(6, 3)])

    orchestrator.record_walkover(stage, fixture.id, Side.B)

    assert fixture.status == MatchStatus.WALKOVER
    assert fixture.sub_matches[1].status == MatchStatus.CANCELLED
    assert orchestrator.pending_matches(stage) == []
    assert stage.state == StageState.GROUPS_COMPLETE


def test_starting_a_game_starts_the_fixture(orchestrator):
    stage, fixture = _two_team_stage(orchestrator)

    orchestrator.start_match(stage, fixture.sub_matches[1].id)

    assert fixture.sub_matches[1].status == MatchStatus.IN_PROGRESS
    assert fixture.status == MatchStatus.IN_PROGRESS


def test_played_games_keep_the_groups(orchestrator):
    stage, fixture = _two_team_stage(orchestrator)
    orchestrator.record_result(stage, fixture.sub_matches[0].id, [(6, 3)])

    with pytest.raises(HasResults):
        orchestrator.cancel_groups(stage)


def test_group_game_correction_can_reopen_the_fixture(orchestrator):
    stage, fixture = _two_team_stage(orchestrator)
    play_pending(orchestrator, stage)
    assert stage.state == StageState.GROUPS_COMPLETE

    orchestrator.correct_result(stage, fixture.sub_matches[1].id, [(2, 6)])

    assert fixture.status == MatchStatus.IN_PROGRESS
    assert len(fixture.sub_matches) == 3
    assert stage.state == StageState.GROUPS_GENERATED
    assert all(r.matches_played == 0 for r in stage.standings[fixture.group_id])

    orchestrator.record_result(stage, fixture.sub_matches[2].id, [(6, 1)])
    assert fixture.winner is Side.A
    assert stage.state == StageState.GROUPS_COMPLETE


def _team_elimination(orchestrator, team_size):
    config = _config(team_size=team_size)
    stage = orchestrator.create_stage(make_players(6 * team_size), config, "s1")
    orchestrator.generate_groups(stage)
    play_pending(orchestrator, stage)
    orchestrator.generate_elimination(stage)
    return stage


def test_bracket_fixtures_get_games_once_both_teams_are_known(orchestrator):
    stage = _team_elimination(orchestrator, 4)
    semi, other = (stage.bracket.matches[f"s1:ko:r1m{n}"] for n in (1, 2))
    assert len(semi.sub_matches) == 2

    for game in list(semi.sub_matches):
        orchestrator.record_result(stage, game.id, [(6, 2)])
    final = stage.bracket.matches.get("s1:ko:r2m1")
    assert stage.bracket.node(2, 0).occupant == semi.side_a[0]
    assert final is None or final.sub_matches == []

    for game in list(other.sub_matches):
        orchestrator.record_result(stage, game.id, [(6, 2)])
    final = stage.bracket.matches["s1:ko:r2m1"]
    assert len(final.sub_matches) == 2


def test_elimination_game_correction_cannot_reopen_the_fixture(orchestrator):
    stage = _team_elimination(orchestrator, 4)
    semi = stage.bracket.matches["s1:ko:r1m1"]
    for game in list(semi.sub_matches):
        orchestrator.record_result(stage, game.id, [(6, 2)])
    second = semi.sub_matches[1]

    with pytest.raises(BracketStateException):
        orchestrator.correct_result(stage, second.id, [(2, 6)])

    assert [s.to_list() for s in second.score] == [[6, 2]]
    assert len(semi.sub_matches) == 2
    assert semi.winner is Side.A


def test_elimination_game_correction_moves_the_new_team_on(orchestrator):
    stage = _team_elimination(orchestrator, 6)
    semi = stage.bracket.matches["s1:ko:r1m1"]
    for game in list(semi.sub_matches):
        orchestrator.record_result(stage, game.id, [(6, 2)])
    play_pending(orchestrator, stage)
    final = stage.bracket.matches["s1:ko:r2m1"]
    old, new = semi.side_a[0], semi.side_b[0]
    assert final.side_a == (old,)

    orchestrator.correct_result(stage, semi.sub_matches[0].id, [(2, 6)])
    assert semi.winner_ids == (old,)
    orchestrator.correct_result(stage, semi.sub_matches[1].id, [(2, 6)])

    assert semi.winner_ids == (new,)
    assert stage.bracket.node(2, 0).occupant == new
    assert final.side_a == (new,)
    members = stage.entrant_lookup()[new].member_ids
    assert final.sub_matches[0].side_a == members[:2]


def test_simulated_team_stage_reaches_a_champion(orchestrator):
    stage = orchestrator.create_stage(
        make_players(48), _config(random_seed=3), "s1"
    )
    orchestrator.generate_groups(stage)
    while play_pending(orchestrator, stage):
        pass
    orchestrator.generate_elimination(stage)
    while stage.state != StageState.FINISHED and play_pending(orchestrator, stage):
        pass

    assert stage.state == StageState.FINISHED
    assert stage.champion_id in {t.id for t in stage.teams}


# ----------------------------------------------------------------------
# Crossings
# ----------------------------------------------------------------------


def _qualifiers(builder, letters):
    groups, standings = ranked_groups([[f"{x}1", f"{x}2"] for x in letters])
    return builder.collect_qualifiers(groups, standings, 2)


def test_three_groups_give_byes_to_two_group_winners(builder):
    qualifiers = _qualifiers(builder, "abc")

    bracket = builder.build_bracket_from_crossing(
        qualifiers, get_team_crossing(3), "s1"
    )

    assert bracket.size == 8
    assert [n.occupant for n in bracket.round_nodes(1)] == [
        "a1", BYE_MARKER, "c1", "b2", "b1", BYE_MARKER, "a2", "c2",
    ]  # fmt: skip
    assert bracket.node(2, 0).occupant == "a1"
    assert bracket.node(2, 2).occupant == "b1"
    assert bracket.matches["s1:ko:r1m2"].participants == ("c1", "b2")


def test_four_groups_cross_winners_with_runners_up(builder):
    bracket = builder.build_bracket_from_crossing(
        _qualifiers(builder, "abcd"), get_team_crossing(4), "s1"
    )

    first_round = [bracket.matches[f"s1:ko:r1m{n}"].participants for n in range(1, 5)]
    assert first_round == [("a1", "b2"), ("c1", "d2"), ("b1", "a2"), ("d1", "c2")]


def test_eight_groups_fill_a_bracket_of_sixteen(builder):
    bracket = builder.build_bracket_from_crossing(
        _qualifiers(builder, "abcdefgh"), get_team_crossing(8), "s1"
    )

    assert bracket.size == 16
    assert bracket.matches["s1:ko:r1m8"].participants == ("h1", "g2")
    assert all(m.status == MatchStatus.SCHEDULED for m in bracket.matches.values())


@pytest.mark.parametrize("count", [3, 4, 5, 6, 7, 8])
def test_every_crossing_places_each_qualifier_once(count):
    crossing = get_team_crossing(count)

    filled = [slot for slot in crossing if slot is not None]

    assert len(filled) == 2 * count
    assert set(filled) == {(rank, g) for rank in (1, 2) for g in range(count)}


def test_crossing_needs_every_listed_qualifier(builder):
    groups, standings = ranked_groups([["a1", "a2"], ["b1", "b2"], ["c1"]])
    qualifiers = builder.collect_qualifiers(groups, standings, 2)

    with pytest.raises(InsufficientGroups):
        builder.build_bracket_from_crossing(qualifiers, get_team_crossing(3))


def test_crossings_apply_to_two_classifiers_per_group_only():
    groups, _ = ranked_groups([["a1", "a2"], ["b1", "b2"], ["c1", "c2"]])

    assert create_format(_config()).knockout_crossing(groups) is not None
    assert create_format(_config(classifiers_per_group=1)).knockout_crossing(
        groups
    ) is None
    assert create_format(StageConfig()).knockout_crossing(groups) is None
    assert get_team_crossing(2) is None
