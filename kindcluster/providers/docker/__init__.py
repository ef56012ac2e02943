"""Docker node commands, networks, image pulls and host inspection."""