"""Pytest configuration and shared catalog fixtures."""

import sys
from pathlib import Path

import pytest

# Make the project root importable without an editable install
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from moviebuddy.models import Movie  # noqa: E402


def make_movie(movie_id, title, **fields):
	return Movie(id=movie_id, title=title, **fields)


@pytest.fixture
def catalog():
	"""Small catalog covering every language, mood and decade the router knows about."""
	return [
		make_movie('1', 'Inception', director='Christopher Nolan', cast='Leonardo DiCaprio, Elliot Page',
			genres='Action, Science Fiction', original_language='en', overview='A thief who steals secrets through dreams.',
			popularity=80.0, release_date='2010-07-15', vote_average=8.4, vote_count=30000),
		make_movie('2', 'The Dark Knight', director='Christopher Nolan', cast='Christian Bale, Heath Ledger',
			genres='Drama, Action, Crime, Thriller', original_language='en', overview='Batman faces the Joker.',
			popularity=90.0, release_date='2008-07-16', vote_average=8.5, vote_count=31000),
		make_movie('3', 'Titanic', director='James Cameron', cast='Leonardo DiCaprio, Kate Winslet',
			genres='Drama, Romance', original_language='en', overview='A love story aboard the ill-fated ship.',
			popularity=95.0, release_date='1997-11-18', vote_average=7.9, vote_count=24000),
		make_movie('4', 'Toy Story', director='John Lasseter', cast='Tom Hanks, Tim Allen',
			genres='Animation, Family, Comedy', original_language='en', overview='Toys come to life.',
			popularity=75.0, release_date='1995-10-30', vote_average=8.0, vote_count=17000),
		make_movie('5', 'Dilwale Dulhania Le Jayenge', director='Aditya Chopra', cast='Shah Rukh Khan, Kajol',
			genres='Comedy, Drama, Romance', original_language='hi', overview='Raj and Simran meet in Europe.',
			popularity=24.0, release_date='1995-10-20', vote_average=8.5, vote_count=4000),
		make_movie('6', 'Vikram Vedha', director='Pushkar-Gayathri', cast='R. Madhavan, Vijay Sethupathi',
			genres='Action, Crime, Thriller', original_language='ta', overview='A cop hunts a gangster who tells stories.',
			popularity=9.8, release_date='2017-07-21', vote_average=8.0, vote_count=380),
		make_movie('7', 'Baahubali: The Beginning', director='S. S. Rajamouli', cast='Prabhas, Rana Daggubati',
			genres='Action, Drama, Fantasy', original_language='te', overview='A young man learns of his royal heritage.',
			popularity=18.0, release_date='2015-07-10', vote_average=7.5, vote_count=1100),
		make_movie('8', 'Blade Runner', director='Ridley Scott', cast='Harrison Ford, Rutger Hauer',
			genres='Science Fiction, Drama, Thriller', original_language='en', overview='A blade runner hunts replicants.',
			popularity=51.0, release_date='1982-06-25', vote_average=7.9, vote_count=13000),
		make_movie('9', 'Undated Mystery', director='', cast='',
			genres='Mystery', original_language='en', overview='Nobody knows when this was made.',
			popularity=5.0, release_date='unknown', vote_average=0.0, vote_count=0),
	]
