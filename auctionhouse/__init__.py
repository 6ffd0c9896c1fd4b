"""
Auction House

An auction engine with escrowed settlement:
- Time-boxed listings with reserve prices
- Monotonic bidding with an anti-snipe deadline rule
- Pull-payment refunds for outbid bidders
- Reentrancy-guarded payouts
- Running statistics and leaderboards
"""
