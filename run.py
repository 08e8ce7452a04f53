from sportsbook import create_app, db
from sportsbook.models import Line, Pick, Player, Prediction, Result, Round, Score

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "db": db,
        "Player": Player,
        "Round": Round,
        "Prediction": Prediction,
        "Line": Line,
        "Pick": Pick,
        "Result": Result,
        "Score": Score,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=app.config.get("DEBUG", False))
