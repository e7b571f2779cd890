"""HTTP server for the provably fair blackjack engine."""
