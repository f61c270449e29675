"""
Flask server exposing casting, claiming and the game clock
"""
import logging

from flask import Flask, jsonify, request

from auth import rate_limit, require_auth
from config import Config
from game_loop import GameLoop, TickRunner
from models import CastRejected, NoUnclaimedCatch, bonus_to_dict
from persistence import JsonCatchStore, SupabaseCatchStore
from player_service import MemoryPlayerService, PlayerService
from static_data import JsonStaticData, SupabaseStaticData

logger = logging.getLogger(__name__)

REJECTION_STATUS = {
    'invalid_cast': 400,
    'duplicate_pending': 409,
    'unclaimed_outstanding': 409,
    'hand_mismatch': 409,
}


def build_game_loop() -> GameLoop:
    """Wire the game loop to the configured data backend"""
    if Config.DATA_BACKEND == 'supabase':
        from supabase import create_client

        client = create_client(Config.SUPABASE_URL, Config.SUPABASE_KEY)
        game_loop = GameLoop(
            static_data=SupabaseStaticData(client),
            catch_store=SupabaseCatchStore(client),
            players=PlayerService(client),
        )
    else:
        game_loop = GameLoop(
            static_data=JsonStaticData(Config.FISH_DATA_FILE, Config.CARDS_DATA_FILE),
            catch_store=JsonCatchStore(Config.HISTORY_FILE, Config.UNCLAIMED_FILE),
            players=MemoryPlayerService(),
        )

    game_loop.restore_unclaimed()
    return game_loop


def create_app(game_loop: GameLoop = None) -> Flask:
    app = Flask(__name__)
    game_loop = game_loop or build_game_loop()
    app.config['GAME_LOOP'] = game_loop

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok'})

    @app.route('/clock', methods=['GET'])
    def clock():
        return jsonify(game_loop.status())

    @app.route('/fish', methods=['GET'])
    def fish():
        table = game_loop.read_fish()
        return jsonify({key: stats.to_dict() for key, stats in table.items()})

    @app.route('/player', methods=['GET'])
    @require_auth
    def player():
        try:
            state = game_loop.players.ensure_player(request.player_id, game_loop.read_cards().indices())
        except Exception:
            logger.exception("Failed to load player %s", request.player_id)
            return jsonify({'error': 'Player store unavailable'}), 503
        return jsonify(state)

    @app.route('/cast', methods=['POST'])
    @require_auth
    @rate_limit()
    def cast():
        body = request.get_json(silent=True) or {}
        card_indices = body.get('cast')

        try:
            state = game_loop.players.ensure_player(request.player_id, game_loop.read_cards().indices())
        except Exception:
            logger.exception("Failed to load player %s", request.player_id)
            return jsonify({'error': 'Player store unavailable'}), 503

        try:
            pending = game_loop.submit_cast(request.player_id, card_indices, hand=state.get('hand'))
        except CastRejected as e:
            return jsonify({'error': e.reason, 'message': e.message}), REJECTION_STATUS.get(e.reason, 400)

        return jsonify({
            'success': True,
            'cast': pending.cast,
            'depth': pending.depth,
            'bonuses': [bonus_to_dict(b) for b in pending.bonuses],
            'message': 'Line cast! Your catch resolves on the next tick.',
        })

    @app.route('/claim', methods=['POST'])
    @require_auth
    @rate_limit()
    def claim():
        try:
            record = game_loop.claim_catch(request.player_id)
        except NoUnclaimedCatch:
            return jsonify({'error': 'none_unclaimed', 'message': 'No catch waiting to be claimed'}), 404

        return jsonify({
            'success': True,
            'catch': record.to_dict(),
            'message': f"Caught a {record.fish_type}!",
        })

    return app


if __name__ == '__main__':
    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app = create_app()
    ticker = TickRunner(app.config['GAME_LOOP'])
    ticker.start()
    try:
        app.run(host='0.0.0.0', port=Config.PORT)
    finally:
        ticker.stop()
