"""
Game recommendation API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import logging

from gamewatch.core.config import settings
from gamewatch.services.game_recommendation_service import (
    GameRecommendationService,
    SleeperUserNotFoundError,
    game_recommendation_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()

NO_GAMES_MESSAGE = "No games found with your players this week. Check your league settings."


def get_recommendation_service() -> GameRecommendationService:
    return game_recommendation_service


@router.get("/nfl/state")
async def get_nfl_state(
    service: GameRecommendationService = Depends(get_recommendation_service),
):
    """Current NFL week and season, for pre-populating the week selector"""
    state = await service.get_current_league_state()
    return {"status": "success", "state": state.model_dump()}


@router.get("/users/{username}")
async def get_sleeper_user(
    username: str,
    service: GameRecommendationService = Depends(get_recommendation_service),
):
    try:
        user = await service.resolve_user(username)
    except SleeperUserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "success", "user": user.model_dump()}


@router.get("/recommendations")
async def get_recommendations(
    username: str = Query(..., min_length=1),
    number_of_games: int = Query(1, ge=1, le=settings.MAX_GAMES_PER_REQUEST),
    only_starters: bool = False,
    include_opponents: bool = False,
    week: Optional[int] = Query(None, ge=1, le=settings.REGULAR_SEASON_WEEKS),
    service: GameRecommendationService = Depends(get_recommendation_service),
):
    """Rank this week's NFL games by how many of the user's players are in them"""
    try:
        recommendations = await service.recommend_for_username(
            username,
            number_of_games=number_of_games,
            only_starters=only_starters,
            include_opponents=include_opponents,
            selected_week=week,
        )
    except SleeperUserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error fetching recommended games for {username}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch recommendations")

    response = {
        "status": "success",
        "recommendations": [r.model_dump() for r in recommendations],
        "count": len(recommendations),
    }
    if not recommendations:
        response["message"] = NO_GAMES_MESSAGE
    return response


@router.get("/users/{user_id}/recommended-game")
async def get_recommended_game(
    user_id: str,
    service: GameRecommendationService = Depends(get_recommendation_service),
):
    """Single best game by starter count for a Sleeper user id"""
    try:
        recommendation = await service.get_recommended_game(user_id)
    except Exception as e:
        logger.error(f"Error fetching recommended game for {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch recommendation")
    return {
        "status": "success",
        "recommendation": recommendation.model_dump() if recommendation else None,
    }
