"""
Math High-Low Web App
Streamlit interface for solving hands, playing rounds and running simulations.
"""

import math

import pandas as pd
import streamlit as st

from highlow_sim.engine.cards import CardKind, Hand, OperatorType, SpecialType
from highlow_sim.engine.builder import ExpressionBuilder
from highlow_sim.engine.game import GameState, Winner
from highlow_sim.simulator import Simulator, BatchResult
from highlow_sim.presets import PRESETS

# Page config
st.set_page_config(
    page_title="Math High-Low",
    page_icon="🧮",
    layout="wide"
)

st.title("🧮 Math High-Low")
st.markdown("*Build the expression closest to the target*")

# Initialize simulator (cached)
@st.cache_resource
def get_simulator():
    return Simulator()

sim = get_simulator()

# Sidebar for settings
st.sidebar.header("Settings")

preset_options = list(PRESETS.keys())
preset_display = {k: f"{PRESETS[k].name}" for k in preset_options}

selected_preset = st.sidebar.selectbox(
    "Preset",
    options=preset_options,
    format_func=lambda x: preset_display[x]
)

preset = PRESETS[selected_preset]
st.sidebar.markdown(f"*{preset.description}*")
st.sidebar.markdown(f"**Player:** {preset.player_strategy.value} | **AI:** {preset.ai_strategy.value}")

solver_tab, play_tab, sim_tab = st.tabs(["🔎 Solver", "🃏 Play", "📊 Simulation"])

OPERATOR_CHOICES = {op.symbol: op for op in (OperatorType.ADD, OperatorType.SUBTRACT, OperatorType.DIVIDE)}


# --- Solver ---
with solver_tab:
    st.subheader("Find the best expression")

    col1, col2 = st.columns(2)
    with col1:
        numbers_text = st.text_input("Number cards (comma separated, 0-10)", value="4, 5, 10")
        target = st.number_input("Target", value=20, step=1)
    with col2:
        operator_symbols = st.multiselect(
            "Operator cards", options=list(OPERATOR_CHOICES), default=list(OPERATOR_CHOICES))
        multiply_cards = st.number_input("Forced × cards", min_value=0, max_value=3, value=0)
        root_cards = st.number_input("√ cards", min_value=0, max_value=3, value=0)

    if st.button("Solve", type="primary"):
        try:
            numbers = [int(n) for n in numbers_text.replace(" ", "").split(",") if n]
        except ValueError:
            st.error("Number cards must be whole numbers.")
            numbers = []

        if numbers:
            specials = ([SpecialType.MULTIPLY] * int(multiply_cards)
                        + [SpecialType.SQUARE_ROOT] * int(root_cards))
            solution = sim.solve(numbers, int(target),
                                 [OPERATOR_CHOICES[s] for s in operator_symbols], specials)

            if solution.valid:
                st.success(f"**{solution.expression}** = {solution.value:.2f}")
                st.metric("Distance to target", f"{solution.distance:.2f}")
            else:
                st.error(f"No legal expression for this hand: {solution.error}")
                if solution.expression:
                    st.caption(f"Closest attempt: {solution.expression}")


# --- Play ---
def _new_game():
    game = GameState(config=preset.build_config(), preset_name=selected_preset)
    st.session_state.game = game
    st.session_state.game_preset = selected_preset
    st.session_state.ai = sim.get_strategy(preset.ai_strategy)
    st.session_state.builder = ExpressionBuilder()
    st.session_state.last_result = None
    st.session_state.message = ""


def _deal(bet: int):
    game = st.session_state.game
    game.deal_round(bet=bet)
    st.session_state.builder.set_hand(game.player_hand)
    st.session_state.last_result = None
    st.session_state.message = "Pick a number card."


with play_tab:
    if st.session_state.get("game_preset") != selected_preset:
        _new_game()

    game: GameState = st.session_state.game
    builder: ExpressionBuilder = st.session_state.builder

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Your credits", f"${game.player_credits}")
    with col2:
        st.metric("AI credits", f"${game.ai_credits}")
    with col3:
        st.metric("Round", game.round_number + (1 if game.round_dealt else 0))

    if game.is_over:
        winner = game.winner
        if winner == Winner.PLAYER:
            st.success("🏆 You won the match!")
        elif winner == Winner.AI:
            st.error("💀 The AI won the match")
        else:
            st.info("The match ended level")
        if st.button("New match"):
            _new_game()
            st.rerun()

    elif not game.round_dealt:
        bet = st.slider("Bet", min_value=game.config.min_bet,
                        max_value=max(game.config.min_bet, min(game.config.max_bet, game.player_credits)),
                        value=game.config.min_bet)
        if st.button("Deal round", type="primary"):
            _deal(bet)
            st.rerun()

    else:
        st.markdown(f"### Target: {game.target}  |  Bet: ${game.bet}")
        st.code(builder.expression.to_display_string() or " ")
        if st.session_state.message:
            st.caption(st.session_state.message)

        hand: Hand = game.player_hand
        cols = st.columns(max(1, hand.total_card_count()))
        for i, card in enumerate(hand.cards):
            label = card.display_text
            if card.kind == CardKind.SPECIAL:
                label = f"[{label}]"
            with cols[i]:
                if st.button(label, key=f"card_{game.round_number}_{i}", disabled=builder.is_used(card)):
                    step = builder.play_card(card)
                    st.session_state.message = step.message
                    st.rerun()

        col1, col2 = st.columns(2)
        with col1:
            if st.button("Reset expression"):
                builder.reset()
                st.session_state.message = "Pick a number card."
                st.rerun()
        with col2:
            if st.button("Submit", type="primary", disabled=not builder.is_finished()):
                ai_expression = st.session_state.ai.play_turn(game.ai_hand, game.target)
                ai_hand_text = str(game.ai_hand)
                result = game.score_round(builder.expression, ai_expression)
                game.apply_result(result)
                st.session_state.last_result = (result, ai_hand_text)
                st.session_state.message = ""
                st.rerun()

    if st.session_state.last_result:
        result, ai_hand_text = st.session_state.last_result
        st.divider()
        if result.winner == Winner.PLAYER:
            st.success(result.summary())
        elif result.winner == Winner.AI:
            st.error(result.summary())
        else:
            st.info(result.summary())
        st.caption(f"AI hand: {ai_hand_text}")
        st.text(result.detail())


# --- Simulation ---
with sim_tab:
    num_runs = st.slider("Number of matches", min_value=10, max_value=300, value=50, step=10)

    if st.button("🎲 Run Simulation", type="primary", use_container_width=True):
        progress_bar = st.progress(0)
        status_text = st.empty()

        player_wins = 0
        ai_wins = 0
        draws = 0
        total_rounds = 0
        ai_exact = 0
        rounds_distribution = {}
        distance_rows = []

        for i in range(num_runs):
            summary = sim.run(selected_preset, verbose=False)

            if summary.winner == Winner.PLAYER.name:
                player_wins += 1
            elif summary.winner == Winner.AI.name:
                ai_wins += 1
            else:
                draws += 1
            total_rounds += summary.rounds_played
            rounds_distribution[summary.rounds_played] = rounds_distribution.get(summary.rounds_played, 0) + 1

            for detail in summary.round_history:
                if detail.ai_distance == 0:
                    ai_exact += 1
                for side, distance in (("Player", detail.player_distance), ("AI", detail.ai_distance)):
                    if math.isfinite(distance):
                        distance_rows.append({"Side": side, "Distance": round(distance)})

            progress_bar.progress((i + 1) / num_runs)
            status_text.text(f"Match {i + 1}/{num_runs}... ({player_wins} player wins so far)")

        progress_bar.empty()
        status_text.empty()

        distances = pd.DataFrame(distance_rows, columns=["Side", "Distance"])
        side_means = distances.groupby("Side")["Distance"].mean() if not distances.empty else pd.Series(dtype=float)

        result = BatchResult(
            matches=num_runs,
            player_wins=player_wins,
            ai_wins=ai_wins,
            draws=draws,
            player_win_rate=player_wins / num_runs * 100,
            avg_rounds=total_rounds / num_runs,
            avg_player_distance=side_means.get("Player", math.inf),
            avg_ai_distance=side_means.get("AI", math.inf),
            ai_exact_rate=ai_exact / max(1, total_rounds) * 100,
            rounds_distribution=rounds_distribution,
            preset_used=selected_preset,
        )

        st.subheader(f"Results ({num_runs} matches)")

        if result.player_win_rate > 50:
            st.success(f"🏆 Player wins: {result.player_wins}/{result.matches} ({result.player_win_rate:.1f}%)")
        elif result.player_win_rate > 0:
            st.warning(f"Player wins: {result.player_wins}/{result.matches} ({result.player_win_rate:.1f}%)")
        else:
            st.error(f"Player wins: {result.player_wins}/{result.matches} ({result.player_win_rate:.1f}%)")

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("AI Wins", result.ai_wins)
        with col2:
            st.metric("Avg Rounds", f"{result.avg_rounds:.1f}")
        with col3:
            st.metric("Avg Player Distance", f"{result.avg_player_distance:.2f}")
        with col4:
            st.metric("Avg AI Distance", f"{result.avg_ai_distance:.2f}")

        st.metric("AI Exact Hits", f"{result.ai_exact_rate:.1f}% of rounds")

        st.subheader("Distance Distribution")
        if not distances.empty:
            chart_data = (distances.groupby(["Distance", "Side"]).size()
                          .unstack(fill_value=0)
                          .sort_index())
            st.bar_chart(chart_data)

        st.subheader("Match Length")
        rounds_data = pd.DataFrame({
            'Rounds': list(rounds_distribution.keys()),
            'Matches': list(rounds_distribution.values())
        }).sort_values('Rounds')
        st.bar_chart(rounds_data.set_index('Rounds'))

# Footer
st.divider()
st.markdown("*Built with the highlow_sim engine*")
